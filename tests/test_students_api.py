import pytest


def test_create_list_and_pay_flow(client):
    r = client.post('/student', json={'name': 'Alice', 'fees': 1000})
    assert r.status_code == 201
    created = r.json()
    assert created['name'] == 'Alice'
    assert created['fees'] == 1000
    assert created['feePaid'] == 0
    assert 'createdAt' in created and 'updatedAt' in created

    listing = client.get('/students')
    assert listing.status_code == 200
    body = listing.json()
    assert isinstance(body, list)
    assert len(body) == 1
    assert body[0]['id'] == created['id']

    sid = created['id']
    paid = client.put(f'/student/{sid}/pay', json={'amount': 200})
    assert paid.status_code == 200
    assert paid.json()['feePaid'] == 200

    paid = client.put(f'/student/{sid}/pay', json={'amount': 300})
    assert paid.status_code == 200
    assert paid.json()['feePaid'] == 500


def test_list_is_empty_initially(client):
    r = client.get('/students')
    assert r.status_code == 200
    assert r.json() == []


def test_get_student_by_id(client, make_student):
    student = make_student(name='Bob', fees=450.5)
    r = client.get(f"/student/{student['id']}")
    assert r.status_code == 200
    assert r.json()['name'] == 'Bob'
    assert r.json()['fees'] == 450.5


@pytest.mark.parametrize('sid', ['999', 'abc', '-1'])
def test_get_unknown_student_returns_404(client, sid):
    r = client.get(f'/student/{sid}')
    assert r.status_code == 404
    assert r.json() == {'message': 'Student not found'}


@pytest.mark.parametrize('payload', [
    {'fees': 1000},
    {'name': 'Alice'},
    {'name': 'Alice', 'fees': 0},
    {'name': '', 'fees': 1000},
    {'name': None, 'fees': 1000},
    {'name': 'Alice', 'fees': None},
    {'name': 42, 'fees': 1000},
    {},
])
def test_create_rejects_missing_or_falsy_fields(client, payload):
    r = client.post('/student', json=payload)
    assert r.status_code == 400
    assert r.json() == {'message': 'Missing name or fees'}
    assert client.get('/students').json() == []


def test_create_rejects_non_numeric_fees(client):
    r = client.post('/student', json={'name': 'Alice', 'fees': 'lots'})
    assert r.status_code == 400
    assert r.json() == {'message': 'Invalid fees'}


def test_create_accepts_numeric_string_fees(client):
    r = client.post('/student', json={'name': 'Carol', 'fees': '750'})
    assert r.status_code == 201
    assert r.json()['fees'] == 750


def test_create_without_body_is_bad_request(client):
    r = client.post('/student')
    assert r.status_code == 400


def test_malformed_json_is_bad_request(client):
    r = client.post('/student', content=b'{not json', headers={'Content-Type': 'application/json'})
    assert r.status_code == 400
    assert 'message' in r.json()


@pytest.mark.parametrize('payload', [
    {},
    {'amount': 0},
    {'amount': -50},
    {'amount': None},
    {'amount': 'abc'},
    {'amount': '-5'},
    {'amount': True},
])
def test_pay_rejects_invalid_amount_without_mutation(client, make_student, payload):
    student = make_student()
    r = client.put(f"/student/{student['id']}/pay", json=payload)
    assert r.status_code == 400
    assert r.json() == {'message': 'Invalid amount'}
    assert client.get(f"/student/{student['id']}").json()['feePaid'] == 0


def test_pay_accepts_numeric_string_amount(client, make_student):
    student = make_student()
    r = client.put(f"/student/{student['id']}/pay", json={'amount': '125.5'})
    assert r.status_code == 200
    assert r.json()['feePaid'] == 125.5


def test_pay_unknown_student_returns_404(client):
    r = client.put('/student/12345/pay', json={'amount': 10})
    assert r.status_code == 404
    assert r.json() == {'message': 'Student not found'}


def test_pay_allows_overpayment(client, make_student):
    student = make_student(fees=100)
    r = client.put(f"/student/{student['id']}/pay", json={'amount': 250})
    assert r.status_code == 200
    assert r.json()['feePaid'] == 250
    assert r.json()['fees'] == 100


def test_payments_only_touch_their_student(client, make_student):
    alice = make_student(name='Alice')
    bob = make_student(name='Bob')
    client.put(f"/student/{alice['id']}/pay", json={'amount': 40})
    assert client.get(f"/student/{bob['id']}").json()['feePaid'] == 0
    assert client.get(f"/student/{alice['id']}").json()['feePaid'] == 40


def test_request_id_is_echoed(client):
    r = client.get('/health', headers={'X-Request-ID': 'abc123'})
    assert r.status_code == 200
    assert r.json() == {'status': 'ok'}
    assert r.headers['X-Request-ID'] == 'abc123'


def test_integers_too_large_for_a_float_are_bad_requests(client, make_student):
    huge = int('1' + '0' * 400)
    r = client.post('/student', json={'name': 'Big', 'fees': huge})
    assert r.status_code == 400
    assert r.json() == {'message': 'Invalid fees'}

    student = make_student()
    r = client.put(f"/student/{student['id']}/pay", json={'amount': huge})
    assert r.status_code == 400
    assert r.json() == {'message': 'Invalid amount'}
    assert client.get(f"/student/{student['id']}").json()['feePaid'] == 0


def test_payment_overflowing_the_balance_is_rejected(client, make_student):
    student = make_student()
    first = client.put(f"/student/{student['id']}/pay", json={'amount': 1e308})
    assert first.status_code == 200
    assert first.json()['feePaid'] == 1e308

    second = client.put(f"/student/{student['id']}/pay", json={'amount': 1e308})
    assert second.status_code == 400
    assert second.json() == {'message': 'Invalid amount'}
    assert client.get(f"/student/{student['id']}").json()['feePaid'] == 1e308

    third = client.put(f"/student/{student['id']}/pay", json={'amount': 5})
    assert third.status_code == 200
    assert third.json()['feePaid'] == 1e308 + 5

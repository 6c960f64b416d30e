"""
test_app.py — HTTP tests for app.py using the Flask test client.
"""
import pytest

from app import app
from funcviz.config import MAX_RESOLUTION, MAX_SURFACE_RESOLUTION


@pytest.fixture
def client():
    app.config['TESTING'] = True
    with app.test_client() as client:
        yield client


# ── Health & gallery ──────────────────────────────────────

def test_health_check(client):
    resp = client.get('/')
    assert resp.status_code == 200
    assert 'status' in resp.get_json()


def test_samples(client):
    resp = client.get('/samples')
    assert resp.status_code == 200
    assert resp.get_json()['Paraboloid (2D)'] == 'x^2 + y^2'


# ── /parse ────────────────────────────────────────────────

def test_parse(client):
    resp = client.post('/parse', json={'expression': 'xy'})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['ok'] is True
    assert body['expression'] == 'x*y'
    assert body['variables'] == ['x', 'y']
    assert body['type'] == 'bivariate'
    assert body['mode'] == 'surface'


def test_parse_bad_math_is_not_an_error(client):
    resp = client.post('/parse', json={'expression': '((('})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['ok'] is False
    assert body['expression'] == '0'


@pytest.mark.parametrize('payload', [{}, {'expression': 5}, {'expression': None}, ['x']])
def test_parse_requires_expression_string(client, payload):
    resp = client.post('/parse', json=payload)
    assert resp.status_code == 400
    assert 'error' in resp.get_json()


def test_parse_rejects_non_json(client):
    resp = client.post('/parse', data='x^2', content_type='text/plain')
    assert resp.status_code == 400


# ── /evaluate ─────────────────────────────────────────────

def test_evaluate(client):
    resp = client.post('/evaluate', json={'expression': '2x', 'bindings': {'x': 3}})
    assert resp.status_code == 200
    assert resp.get_json() == {'result': 6.0, 'expression': '2*x'}


def test_evaluate_domain_error_is_zero(client):
    resp = client.post('/evaluate', json={'expression': '1/x', 'bindings': {'x': 0}})
    assert resp.get_json()['result'] == 0.0


def test_evaluate_without_bindings(client):
    resp = client.post('/evaluate', json={'expression': '2+3'})
    assert resp.get_json()['result'] == 5.0


@pytest.mark.parametrize('bindings', [
    {'x': 'a'}, {'x': True}, {'x': None}, ['x', 1], {'x': 10 ** 400}, {'x': 'inf'},
])
def test_evaluate_rejects_bad_bindings(client, bindings):
    resp = client.post('/evaluate', json={'expression': 'x', 'bindings': bindings})
    assert resp.status_code == 400


# ── /sample ───────────────────────────────────────────────

def test_sample_line(client):
    resp = client.post('/sample', json={'expression': 'x', 'resolution': 10})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['mode'] == 'line'
    assert body['type'] == 'single'
    assert len(body['points']['x']) == 11


def test_sample_line_domain(client):
    resp = client.post('/sample', json={'expression': 'x^2', 'resolution': 2, 'domain': [0, 2]})
    assert resp.get_json()['points']['y'] == pytest.approx([0, 1, 4])


def test_sample_surface(client):
    resp = client.post('/sample', json={
        'expression': 'x^2+y^2',
        'resolution': 4,
        'size': 2,
        'transform': {'scale': {'z': 2}},
    })
    body = resp.get_json()
    assert body['mode'] == 'surface'
    assert len(body['grid']['z']) == 5
    # corner (-1, -1) → 2, scaled by 2
    assert body['grid']['z'][0][0] == pytest.approx(4)


def test_sample_parametric(client):
    resp = client.post('/sample', json={'expression': 'x+y+z+t'})
    body = resp.get_json()
    assert body['mode'] == 'parametric'
    assert body['geometry'] == 'points'


@pytest.mark.parametrize('expression', ['x', 'x^2+y^2', 'x+y+z', 'x+y+z+t'])
def test_parse_and_sample_agree_on_mode(client, expression):
    parsed = client.post('/parse', json={'expression': expression}).get_json()
    sampled = client.post('/sample', json={'expression': expression, 'resolution': 2}).get_json()
    assert parsed['mode'] == sampled['mode']


def test_surface_resolution_is_capped_below_line(client):
    resp = client.post('/sample', json={'expression': 'x*y', 'resolution': MAX_SURFACE_RESOLUTION + 1})
    assert resp.status_code == 400
    resp = client.post('/sample', json={'expression': 'x*y', 'resolution': MAX_SURFACE_RESOLUTION})
    assert resp.status_code == 200
    assert len(resp.get_json()['grid']['z']) == MAX_SURFACE_RESOLUTION + 1
    resp = client.post('/sample', json={'expression': 'x', 'resolution': MAX_RESOLUTION})
    assert resp.status_code == 200


@pytest.mark.parametrize('payload', [
    {'expression': 'x', 'resolution': 0},
    {'expression': 'x', 'resolution': MAX_RESOLUTION + 1},
    {'expression': 'x', 'resolution': 2.5},
    {'expression': 'x', 'domain': [0]},
    {'expression': 'x', 'domain': 'wide'},
    {'expression': 'x', 'size': 'big'},
    {'expression': 'x', 'transform': {'scale': 5}},
    {'expression': 'x', 'transform': {'scale': {'x': 'big'}}},
    {'expression': 'x', 'transform': {'scale': {'y': 'inf'}}},
    {'expression': 'x', 'transform': {'translation': {'x': 'nan'}}},
    {'expression': 'x', 'transform': {'translation': {'x': 10 ** 400}}},
    {'expression': 'x', 'transform': {'reflection': {'x': 'false'}}},
    {'expression': 'x', 'transform': 'flip'},
    {'expression': 'x', 'domain': [0, 10 ** 400]},
    {'expression': 'x*y', 'size': 10 ** 400},
    {'expression': 'x*y', 'size': True},
    {'resolution': 10},
])
def test_sample_rejects_bad_requests(client, payload):
    resp = client.post('/sample', json=payload)
    assert resp.status_code == 400
    assert 'error' in resp.get_json()

import logging
import math

from flask import Flask, request, jsonify
from flask_cors import CORS

from funcviz import SAMPLE_FUNCTIONS, FunctionType, parse
from funcviz.config import HOST, MAX_RESOLUTION, MAX_SURFACE_RESOLUTION, PORT
from funcviz.engine import function_info
from funcviz.logging_config import setup_logging
from funcviz.sampling import Transform, render

logger = logging.getLogger('funcviz.app')

app = Flask(__name__)
CORS(app)


class InvalidRequest(ValueError):
    pass


@app.errorhandler(InvalidRequest)
def bad_request(exc):
    return jsonify({'error': str(exc)}), 400


def _expression(data):
    expression = data.get('expression')
    if not isinstance(expression, str):
        raise InvalidRequest("Invalid request. Please provide an 'expression' string.")
    return expression


def _number(value, name):
    # bool is an int subclass but never a meaningful coordinate
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidRequest(f"'{name}' must be a finite number")
    try:
        value = float(value)
    except OverflowError:
        raise InvalidRequest(f"'{name}' is too large")
    if not math.isfinite(value):
        raise InvalidRequest(f"'{name}' must be a finite number")
    return value


def _resolution(data, limit):
    value = data.get('resolution')
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or not 1 <= value <= limit:
        raise InvalidRequest(f"'resolution' must be an integer between 1 and {limit}")
    return value


def _json_body():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise InvalidRequest('Request body must be a JSON object.')
    return data


@app.route('/', methods=['GET'])
def health_check():
    return jsonify({'status': 'Function parser is online.'})


@app.route('/samples', methods=['GET'])
def samples():
    return jsonify(SAMPLE_FUNCTIONS)


@app.route('/parse', methods=['POST'])
def parse_expression():
    data = _json_body()
    return jsonify(function_info(_expression(data)))


@app.route('/evaluate', methods=['POST'])
def evaluate_expression():
    data = _json_body()
    expression = _expression(data)
    bindings = data.get('bindings') or {}
    if not isinstance(bindings, dict):
        raise InvalidRequest("'bindings' must be an object")
    bindings = {name: _number(value, name) for name, value in bindings.items()}
    parsed = parse(expression)
    return jsonify({'result': parsed.evaluate(bindings), 'expression': parsed.expression})


@app.route('/sample', methods=['POST'])
def sample_expression():
    data = _json_body()
    parsed = parse(_expression(data))
    try:
        transform = Transform.from_dict(data.get('transform'))
    except (TypeError, ValueError) as exc:
        raise InvalidRequest(f'Invalid transform: {exc}')

    limit = MAX_SURFACE_RESOLUTION if parsed.type == FunctionType.BIVARIATE else MAX_RESOLUTION
    kwargs = {'transform': transform, 'resolution': _resolution(data, limit)}
    if 'domain' in data:
        domain = data['domain']
        if not isinstance(domain, list) or len(domain) != 2:
            raise InvalidRequest("'domain' must be a [start, end] pair")
        kwargs['domain'] = (_number(domain[0], 'domain'), _number(domain[1], 'domain'))
    if 'size' in data:
        kwargs['size'] = _number(data['size'], 'size')

    result = render(parsed, **kwargs)
    result.update(parsed.to_dict())
    return jsonify(result)


if __name__ == '__main__':
    setup_logging()
    logger.info('Serving on %s:%s', HOST, PORT)
    app.run(host=HOST, port=PORT)

from flask import Blueprint, jsonify
from duorelay import get_coordinator

main = Blueprint('main', __name__)

@main.route('/')
def index():
    stats = get_coordinator().stats()
    return jsonify({'message': 'Duo relay server is running', **stats})

@main.route('/health')
def health():
    return jsonify({'status': 'ok'})

#!/usr/bin/env python3
"""
Web interface for slide2048.
Uses Flask and SocketIO to expose a game session to a browser front end.
The server sends board state and move results; drawing them is up to the client.
"""

import socket
import threading
import webbrowser
from flask import Flask, request, jsonify
from flask_socketio import SocketIO

from ..utils import config
from ..utils.storage import JsonFileStore, format_duration
from ..game.engine import GameEngine, Direction
from ..game.rng import DefaultRandom
from ..game.session import GameSession

# Initialize Flask app and SocketIO
app = Flask(__name__)
app.config['SECRET_KEY'] = 'secret!'
socketio = SocketIO(app, cors_allowed_origins="*")

# Global variables
session = None
session_lock = threading.Lock()  # the engine has no reentrancy guard
play_timer_thread = None
stop_play_timer = threading.Event()

def create_session(store=None, engine=None):
    """Build the global session from config and resume any saved game."""
    global session
    if store is None:
        store = JsonFileStore(config.STATE_DIR, config.STORAGE_PREFIX)
    if engine is None:
        engine = GameEngine(size=config.GRID_SIZE, random_source=DefaultRandom(config.RANDOM_SEED))
    new_session = GameSession(store, engine)
    with session_lock:
        resumed = new_session.load()
        session = new_session
    print(f"{'Resumed saved game' if resumed else 'Started new game'} "
          f"({engine.size}x{engine.size}, best score {engine.best_score})")
    return session

def get_session():
    if session is None:
        return create_session()
    return session

def stats_payload(current):
    stats = current.stats()
    stats['playTime'] = format_duration(stats['totalPlayTime'])
    return stats

# Get local IP address
def get_local_ip():
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        # doesn't need to be reachable
        s.connect(('10.255.255.255', 1))
        IP = s.getsockname()[0]
    except OSError:
        IP = '127.0.0.1'
    finally:
        s.close()
    return IP

# Flask routes
@app.route('/')
@app.route('/state')
def state():
    current = get_session()
    with session_lock:
        return jsonify(current.snapshot())

@app.route('/move', methods=['POST'])
def move():
    data = request.get_json(silent=True) or {}
    try:
        direction = Direction.parse(data.get('direction'))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    current = get_session()
    with session_lock:
        result = current.move(direction)
        payload = {"moved": result is not None, "state": current.snapshot()}
    if result is not None:
        payload["result"] = result.to_dict()
    return jsonify(payload)

@app.route('/undo', methods=['POST'])
def undo():
    current = get_session()
    with session_lock:
        undone = current.undo()
        payload = current.snapshot()
    payload["undone"] = undone
    return jsonify(payload)

@app.route('/continue', methods=['POST'])
def continue_game():
    current = get_session()
    with session_lock:
        current.continue_game()
        return jsonify(current.snapshot())

@app.route('/new', methods=['POST'])
def new_game():
    current = get_session()
    with session_lock:
        current.new_game()
        return jsonify(current.snapshot())

@app.route('/stats')
def stats():
    current = get_session()
    with session_lock:
        return jsonify(stats_payload(current))

# SocketIO event handlers
@socketio.on('connect')
def handle_connect():
    print(f"Client connected: {request.sid}")
    current = get_session()
    with session_lock:
        snapshot = current.snapshot()
    socketio.emit('game_state', snapshot, room=request.sid)

@socketio.on('disconnect')
def handle_disconnect(*args):
    print(f"Client disconnected: {request.sid}")

@socketio.on('move')
def handle_move(data):
    raw = data.get('direction') if isinstance(data, dict) else data
    try:
        direction = Direction.parse(raw)
    except ValueError as e:
        socketio.emit('error', {'message': str(e)}, room=request.sid)
        return

    current = get_session()
    with session_lock:
        result = current.move(direction)
        snapshot = current.snapshot()
    if result is None:
        socketio.emit('move_rejected', {'direction': direction.value, 'state': snapshot}, room=request.sid)
        return
    # Broadcast to all clients watching this game
    socketio.emit('move_result', {'result': result.to_dict(), 'state': snapshot})

@socketio.on('undo')
def handle_undo():
    current = get_session()
    with session_lock:
        if not current.undo():
            return
        snapshot = current.snapshot()
    socketio.emit('game_state', snapshot)

@socketio.on('continue_game')
def handle_continue():
    current = get_session()
    with session_lock:
        if not current.continue_game():
            return
        snapshot = current.snapshot()
    socketio.emit('game_state', snapshot)

@socketio.on('new_game')
def handle_new_game():
    current = get_session()
    with session_lock:
        current.new_game()
        snapshot = current.snapshot()
    socketio.emit('game_state', snapshot)

@socketio.on('stats')
def handle_stats():
    current = get_session()
    with session_lock:
        payload = stats_payload(current)
    socketio.emit('stats_update', payload, room=request.sid)

# Play time accounting
def play_timer():
    """Add play time in whole seconds every interval until stopped."""
    interval = config.PLAY_TIMER_INTERVAL
    elapsed = 0.0
    while not stop_play_timer.wait(interval):
        current = session
        if current is None:
            continue
        elapsed += interval
        seconds = int(elapsed)
        if seconds == 0:
            continue
        elapsed -= seconds
        with session_lock:
            current.tick(seconds)

def start_play_timer():
    """Start the play-time thread if not already running"""
    global play_timer_thread
    if play_timer_thread is None or not play_timer_thread.is_alive():
        stop_play_timer.clear()
        play_timer_thread = threading.Thread(target=play_timer, daemon=True)
        play_timer_thread.start()
    return play_timer_thread

def stop_timer():
    global play_timer_thread
    stop_play_timer.set()
    if play_timer_thread is not None:
        play_timer_thread.join(timeout=2.0)
    play_timer_thread = None

# Global port variable
port = 5000

def run_server(port_number=5000, debug=False, open_browser=True):
    """
    Run the slide2048 web interface.

    Args:
        port_number: Port to run the server on
        debug: Whether to run in debug mode
        open_browser: Whether to open the browser automatically
    """
    global port
    port = port_number

    get_session()
    start_play_timer()

    # Get local IP
    local_ip = get_local_ip()
    server_url = f"http://{local_ip}:{port}"
    print(f"Starting slide2048 server at {server_url}")

    # Open browser if requested
    if open_browser:
        threading.Timer(1.0, lambda: webbrowser.open(server_url)).start()

    try:
        socketio.run(app, host='0.0.0.0', port=port, debug=debug, allow_unsafe_werkzeug=True)
    finally:
        stop_timer()

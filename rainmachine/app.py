"""
Flask app for RainMachine
"""

import os

from flask import Flask, Response, jsonify, render_template, request
from flask_socketio import SocketIO, emit

from config import config
from rainmachine.controls import CONTROL_MALFORMED
from rainmachine.engine import RainMachineEngine
from rainmachine.scheduler import FrameScheduler

app = Flask(__name__)

# Configure app based on environment
config_name = os.environ.get('FLASK_ENV', 'development')
app.config.from_object(config.get(config_name, config['default']))

socketio = SocketIO(app, cors_allowed_origins="*", async_mode='threading')

# Global engine instance
engine = RainMachineEngine.from_config(app.config)
scheduler = None


def render_tick():
    """One scheduled frame: render and push to clients"""
    image_data, error = engine.render_frame()

    if image_data:
        socketio.emit('frame', {'image': image_data})
        if engine.frame_count % 30 == 0:
            print(f"Rendered {engine.frame_count} frames")
    elif error:
        raise RuntimeError(error)


def handle_render_error(e):
    print(f"Exception in render loop: {e}")
    socketio.emit('status', {'message': f'Render error: {str(e)}', 'type': 'error'})


def start_rendering():
    """Start the rendering loop, returns False if it was already running"""
    global scheduler

    if scheduler is not None and scheduler.running:
        return False

    engine.setup()
    scheduler = FrameScheduler(render_tick, fps=app.config['TARGET_FPS'], on_error=handle_render_error)
    scheduler.start()
    print("Render loop started")
    return True


def stop_rendering():
    """Stop the rendering loop; no frame is rendered after this returns"""
    global scheduler

    if scheduler is None:
        return False
    scheduler.stop()
    scheduler = None
    print("Render loop stopped")
    return True


@app.route('/')
def index():
    """Serve the viewer page"""
    return render_template('index.html',
                           width=engine.resolution[0],
                           height=engine.resolution[1])


@app.route('/status')
def status():
    """Engine status as JSON"""
    data = engine.get_status()
    data['running'] = scheduler is not None and scheduler.running
    return jsonify(data)


@app.route('/frame.jpg')
def frame():
    """Latest committed frame"""
    if not engine.is_initialized:
        return jsonify({'error': 'Surface not initialized'}), 503
    return Response(engine.screen.encode_jpeg(engine.jpeg_quality), mimetype='image/jpeg')


@socketio.on('connect')
def handle_connect():
    """Handle client connection"""
    print(f"Client connected: {request.sid}")
    emit('status', {'message': 'Connected to RainMachine', 'type': 'success'})


@socketio.on('disconnect')
def handle_disconnect():
    """Handle client disconnection"""
    print(f"Client disconnected: {request.sid}")


@socketio.on('control_change')
def handle_control_change(data):
    """Handle a single control value change"""
    try:
        name = data.get('name')
        value = data.get('value')

        result = engine.set_control(name, value)
        if result is None:
            emit('status', {'message': f'Ignored control {name!r}', 'type': 'info'})
        elif result == CONTROL_MALFORMED:
            emit('status', {'message': f'Unreadable value for {name}, using 0', 'type': 'info'})
        else:
            print(f"Control {name} set to {value}")

    except Exception as e:
        emit('status', {'message': f'Error setting control: {str(e)}', 'type': 'error'})


@socketio.on('controls_update')
def handle_controls_update(data):
    """Handle a full snapshot from the input bridge"""
    try:
        controls = data.get('controls', {})
        if not isinstance(controls, dict):
            emit('status', {'message': 'controls must be an object', 'type': 'error'})
            return
        engine.set_controls(controls)

    except Exception as e:
        emit('status', {'message': f'Error updating controls: {str(e)}', 'type': 'error'})


@socketio.on('start_rendering')
def handle_start_rendering():
    """Start the rendering loop"""
    if not start_rendering():
        emit('status', {'message': 'Already running', 'type': 'info'})
        return
    emit('status', {'message': 'Rendering started', 'type': 'success'})


@socketio.on('stop_rendering')
def handle_stop_rendering():
    """Stop the rendering loop"""
    stop_rendering()
    emit('status', {'message': 'Rendering stopped', 'type': 'info'})


@socketio.on('reset')
def handle_reset():
    """Reset scroll offset and lightness trim"""
    engine.reset()
    emit('status', {'message': 'Animation reset requested', 'type': 'info'})


@socketio.on('message')
def handle_message(data):
    """Diagnostic channel: {'action': ..., 'data': ...}"""
    try:
        action = data.get('action') if isinstance(data, dict) else None
        print(f"Received {action}")

        if action == 'getSerialData':
            emit('message', {'action': 'serialData', 'data': engine.latest_controls()})
        elif action == 'test':
            emit('status', {'message': 'Test message received', 'type': 'success'})
        else:
            emit('status', {'message': f'Unknown action: {action}', 'type': 'info'})

    except Exception as e:
        emit('status', {'message': f'Error handling message: {str(e)}', 'type': 'error'})


def create_app(config_name=None):
    """Application factory pattern"""
    global engine

    if config_name is None:
        config_name = os.environ.get('FLASK_ENV', 'development')

    stop_rendering()
    app.config.from_object(config[config_name])
    engine = RainMachineEngine.from_config(app.config)
    return app


if __name__ == '__main__':
    print("Starting RainMachine...")

    port = int(os.environ.get('PORT', 5001))
    host = os.environ.get('HOST', '0.0.0.0')

    if app.config['DEBUG']:
        print(f"Development mode: http://localhost:{port}")
        socketio.run(app, host=host, port=port, debug=True, allow_unsafe_werkzeug=True)
    else:
        print(f"Production mode: http://{host}:{port}")
        socketio.run(app, host=host, port=port)

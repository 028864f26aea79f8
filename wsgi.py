"""
WSGI entry point for RainMachine
"""

from rainmachine.app import app, socketio

if __name__ == "__main__":
    # This is for when running with gunicorn
    socketio.run(app)

"""
Fixed rate frame scheduler

Runs a tick callback on a background thread at a target FPS. stop() waits
for the thread to finish, so once it returns no further tick will run.
"""

import time
import threading


class FrameScheduler:
    def __init__(self, tick, fps=30, on_error=None):
        self.tick = tick
        self.fps = fps
        self.on_error = on_error
        self.thread = None
        self.ticks = 0
        self._stop_event = threading.Event()

    @property
    def frame_time(self):
        return 1.0 / self.fps

    @property
    def running(self):
        return self.thread is not None and self.thread.is_alive() and not self._stop_event.is_set()

    def start(self):
        """Start the loop. Returns False if it was already running."""
        if self.running:
            return False
        self._stop_event.clear()
        self.thread = threading.Thread(target=self._run_loop, daemon=True)
        self.thread.start()
        return True

    def stop(self, timeout=2.0):
        """Stop the loop and wait for the current tick to finish"""
        self._stop_event.set()
        thread = self.thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self.thread = None

    def _run_loop(self):
        while not self._stop_event.is_set():
            start_time = time.time()

            try:
                self.tick()
                self.ticks += 1
            except Exception as e:
                self._stop_event.set()
                if self.on_error:
                    self.on_error(e)
                break

            # Maintain target FPS
            elapsed = time.time() - start_time
            self._stop_event.wait(max(0, self.frame_time - elapsed))

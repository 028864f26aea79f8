"""RainMachine - knob driven procedural rain pattern renderer"""

__version__ = "0.1.0"

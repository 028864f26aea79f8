import os


def _env_int(name, default):
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        print(f"Warning: {name}={value!r} is not an integer, using {default}")
        return default


class Config:
    """Base configuration"""
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'rainmachine_secret_change_in_production'

    # Presentation surface
    SCREEN_WIDTH = _env_int('RAINMACHINE_WIDTH', 1280)
    SCREEN_HEIGHT = _env_int('RAINMACHINE_HEIGHT', 720)
    TARGET_FPS = _env_int('RAINMACHINE_FPS', 30)
    JPEG_QUALITY = 85

    # Native (lo, hi) range of each analog control as delivered by the
    # input bridge. Controls not listed are read as 0..1.
    CONTROL_RANGES = {
        'knob_1': (0.0, 1.0),
        'knob_2': (0.0, 1.0),
        'knob_3': (0.0, 1.0),
        'knob_4': (0.0, 1.0),
        'knob_5': (0.0, 1.0),
        'horizontal_slider': (0.0, 1.0),
        'vertical_slider_1': (0.0, 1.0),
        'vertical_slider_2': (0.0, 1.0),
        'vertical_slider_3': (0.0, 1.0),
    }

    # True: holding left/right keeps drifting the lightness every frame
    LIGHTNESS_REPEAT = os.environ.get('RAINMACHINE_LIGHTNESS_REPEAT', '').lower() in ('1', 'true', 'yes')

    # 'vectorized' (numpy) or 'scalar'
    RENDER_STRATEGY = os.environ.get('RAINMACHINE_RENDER_STRATEGY', 'vectorized')

class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True

class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False

    def __init__(self):
        if not os.environ.get('SECRET_KEY'):
            raise ValueError("SECRET_KEY environment variable must be set in production")
        self.SECRET_KEY = os.environ.get('SECRET_KEY')

class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = True
    SCREEN_WIDTH = 160
    SCREEN_HEIGHT = 96
    TARGET_FPS = 60

config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}

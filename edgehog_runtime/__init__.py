"""Device runtime components: LED blink behaviours, forwarder sessions and runtime options."""

__version__ = "0.1.0"
__all__ = ["forwarder", "led_behavior", "options"]
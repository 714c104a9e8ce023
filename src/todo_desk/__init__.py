"""todo_desk: a to-do list manager with debounced JSON auto-save."""

__version__ = "0.1.0"

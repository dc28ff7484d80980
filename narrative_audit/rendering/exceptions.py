class RenderError(Exception):
    """Raised when a report cannot be rendered to its output format."""

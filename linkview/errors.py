class LinkViewError(Exception):
    pass


class ConfigurationError(LinkViewError):
    pass


class LayoutOverflowError(LinkViewError):
    pass


class RenderError(LinkViewError):
    pass


class AccessorError(RenderError):
    pass


class SinkError(RenderError):
    pass

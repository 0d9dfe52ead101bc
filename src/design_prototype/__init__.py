"""Design Prototype - text or wireframe to html/css/javascript via a generative model."""

__version__ = "0.1.0"

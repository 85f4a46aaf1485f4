"""C.O.R.E prompt builder: relay server and client."""

__version__ = "0.1.0"

"""Line-delimited JSON-RPC bridge exposing GitHub pull-request data as tools."""

__version__ = "0.1.0"

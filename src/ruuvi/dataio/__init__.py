"""Data input/output helpers around the frame codecs.

Nothing here is needed to decode a frame; these modules adapt readings to the
outside world:
- :mod:`json_codec` maps readings to and from JSON-ready dictionaries.
- :mod:`frame_log` reads hex-per-line capture files and tabulates the
  decoded frames as NumPy arrays or CSV.
"""

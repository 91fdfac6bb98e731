"""Video Delivery Converter.

Converts source videos into delivery formats (H.264, H.265, VP9, animated
WebP, GIF and screenshots) through ffmpeg, caching every artifact in a
two-tier on-disk cache so repeated builds skip redundant conversions.
"""

__version__ = "0.1.0"

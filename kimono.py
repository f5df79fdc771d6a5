#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
kimono.py

Download video and audio files from YouTube using yt-dlp.
The mode is taken from the name the script is invoked under, so symlinks
named audio, video, podcast or youtube pick the matching defaults.

Usage:
    kimono.py [ --help | -h | -? | --usage ]
    CONFIG="options" kimono.py ids...
    kimono.py [ options ] ids...
"""

import sys

from channel_access.cli import main


if __name__ == "__main__":
    sys.exit(main())

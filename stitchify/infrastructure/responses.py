from __future__ import annotations

import io

from flask import send_file


def send_png_bytes(data: bytes):
    return send_file(io.BytesIO(data), mimetype="image/png", download_name="stitched.png")

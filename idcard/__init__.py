"""ID Card Extraction Service.

Reads the holder name, barcode payload and portrait photo from a
picture of an identity card, combining Tesseract OCR, ZBar barcode
decoding and OpenCV face detection behind a FastAPI endpoint.
"""

__version__ = "1.0.0"

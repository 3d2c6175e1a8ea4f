"""Image Insight.

A small web service and CLI that extracts text from uploaded images with
Tesseract OCR, after optional OpenCV preprocessing, and describes or answers
questions about images through a multimodal chat model served by Ollama.
"""

__version__ = "1.0.0"

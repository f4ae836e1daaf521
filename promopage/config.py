"""
Global Configuration for Application
"""
import os
import secrets

# Get configuration from environment
DATABASE_URI = os.getenv("DATABASE_URI", "sqlite:///:memory:")

# Configure SQLAlchemy
SQLALCHEMY_DATABASE_URI = DATABASE_URI
SQLALCHEMY_TRACK_MODIFICATIONS = False

# Secret for session management
SECRET_KEY = os.getenv("SECRET_KEY", secrets.token_hex())
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Shown on the landing page and the API when a promotion body is blank
NO_CONTENT_MESSAGE = os.getenv("NO_CONTENT_MESSAGE", "내용이 없습니다.")

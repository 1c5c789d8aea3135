"""
Shared test setup.

Points the email store at a throwaway database before any spamlens
module reads its settings.
"""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="spamlens-tests-")

os.environ["SPAMLENS_EMAIL_DB"] = os.path.join(_TMP_DIR, "emails.db")
os.environ["SPAMLENS_SEED_SAMPLES"] = "true"
os.environ["SPAMLENS_LOG_FORMAT"] = "text"
os.environ["SPAMLENS_OCR_PROVIDER"] = "gemini"

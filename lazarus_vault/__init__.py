"""CLI utility for zero-knowledge encryption of files stored on Walrus.

Files are encrypted locally before upload, and the decryption key is handed
back to the caller only. The tool also derives and signs deterministic hashes
for audit records, so that auditors can re-derive them later.
"""

__name__ = "lazarus_vault"
__version__ = "0.1.0"
__author__ = "Sentinel Protocol Developers"
__license__ = "MIT License"

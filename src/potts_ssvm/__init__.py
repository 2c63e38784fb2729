"""Binary graph labeling with a Potts-model structural SVM."""

__version__ = "0.1.0"

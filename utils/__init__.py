from utils.response_utils import extract_error_message, robust_parse_text

__all__ = ["extract_error_message", "robust_parse_text"]

"""
Error types raised by the pipelines, and the classifier that turns a raw
OpenAI / network failure into the `debug` hint sent back to the client.
"""

import errno
import socket

import openai

NETWORK_ERROR_CODES = ("ENOTFOUND", "ECONNREFUSED", "ECONNRESET", "ETIMEDOUT")

MISSING_KEY_MESSAGE = "Missing OPENAI_API_KEY in .env. Set it and restart the server."


class QuizAppError(Exception):
    """A failure with a user-facing `error` text and an optional `debug` hint."""

    status_code = 500

    def __init__(self, error: str, debug: str | None = None, status_code: int | None = None):
        super().__init__(error)
        self.error = error
        self.debug = debug
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self) -> dict:
        body = {"error": self.error}
        if self.debug is not None:
            body["debug"] = self.debug
        return body


class ConfigurationError(QuizAppError):
    pass


class UpstreamInvocationError(QuizAppError):
    def __init__(self, error: str, debug: str, cause: BaseException):
        super().__init__(error, debug)
        self.cause = cause


class MalformedOutputError(QuizAppError):
    pass


class InvalidJSONError(MalformedOutputError):
    def __init__(self):
        super().__init__(
            "Failed to parse questions from AI (invalid JSON).",
            "The model did not return valid JSON. Check the prompt or inspect "
            "server logs to see the raw output.",
        )


class NoValidQuestionsError(MalformedOutputError):
    def __init__(self):
        super().__init__(
            "No valid questions generated from AI.",
            "The AI response did not contain properly formatted questions. "
            "Try again or adjust the prompt.",
        )


class ClientInputError(QuizAppError):
    status_code = 400


def _status_of(err) -> int | None:
    for attr in ("status_code", "status"):
        value = getattr(err, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
    return None


def _code_from_exception(exc: BaseException) -> str | None:
    if isinstance(exc, (openai.APITimeoutError, TimeoutError, socket.timeout)):
        return "ETIMEDOUT"
    if isinstance(exc, ConnectionRefusedError):
        return "ECONNREFUSED"
    if isinstance(exc, ConnectionResetError):
        return "ECONNRESET"
    if isinstance(exc, socket.gaierror):
        return "ENOTFOUND"
    if isinstance(exc, OSError) and exc.errno is not None:
        name = errno.errorcode.get(exc.errno)
        if name in NETWORK_ERROR_CODES:
            return name
    return None


def _network_code_of(err) -> str | None:
    code = getattr(err, "code", None)
    if isinstance(code, str) and code in NETWORK_ERROR_CODES:
        return code
    if not isinstance(err, BaseException):
        return None

    # the SDK wraps transport errors, so look down the chain too
    seen = set()
    exc = err
    while exc is not None and id(exc) not in seen:
        seen.add(id(exc))
        found = _code_from_exception(exc)
        if found:
            return found
        exc = exc.__cause__ or exc.__context__
    return None


def _message_of(err) -> str | None:
    message = getattr(err, "message", None)
    if isinstance(message, str) and message:
        return message
    if isinstance(err, BaseException) and str(err):
        return str(err)
    return None


def classify_error(err, has_api_key: bool) -> str:
    """
    Build a human-readable diagnostic for a failed model call.

    Precedence: missing key, HTTP status, known network code, message,
    and finally a fixed unknown-error text.
    """
    if not has_api_key:
        return MISSING_KEY_MESSAGE

    status = _status_of(err)
    if status is not None:
        base = f"OpenAI API error (status {status})."
        if status == 401:
            return base + " Authentication failed. Check your API key."
        if status == 429:
            return base + " Rate limit or quota exceeded."
        if status >= 500:
            return base + " OpenAI server side error, try again."
        return base + " Check server logs for more details."

    code = _network_code_of(err)
    if code:
        return (f"Network error ({code}) while contacting OpenAI. "
                "Check your internet connection or firewall.")

    message = _message_of(err)
    if message:
        return f"Unexpected error: {message}"

    return "Unknown error occurred while calling OpenAI."

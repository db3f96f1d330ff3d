from flask import Response


def text_response(message, status=200):
    """Plain-text response, used for mutation acknowledgements and all errors."""
    return Response(message, status=status, mimetype="text/plain")

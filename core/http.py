import json

from django.http import JsonResponse


class PayloadError(ValueError):
    pass


def read_payload(request):
    """
    Returns the request body as a dict.
    JSON bodies are decoded; multipart/form posts fall back to request.POST.
    """
    if request.content_type == 'application/json':
        try:
            data = json.loads(request.body or b'{}')
        except json.JSONDecodeError as exc:
            raise PayloadError('Invalid JSON') from exc
        if not isinstance(data, dict):
            raise PayloadError('Expected a JSON object')
        return data
    return request.POST.dict()


def error_response(message, status=400, **extra):
    return JsonResponse({'error': message, **extra}, status=status)


def form_error_response(form):
    return JsonResponse({'error': 'Invalid data', 'errors': form.errors.get_json_data()}, status=400)

from django.http import JsonResponse


def healthz(request):
    storage = request.storage
    try:
        ok = storage.ping()
    except Exception as e:
        return JsonResponse({'ok': False, 'storage': storage.name, 'error': str(e)}, status=500)
    return JsonResponse({'ok': ok, 'storage': storage.name}, status=200 if ok else 500)

from functools import wraps
import asyncio
import threading

from flask import current_app, request

# Один цикл событий на процесс, работает в отдельном потоке.
# Клиенты хранилищ, привязанные к циклу, создаются один раз, а не на каждый поток запроса
_loop = None
_loop_lock = threading.Lock()


def get_loop() -> asyncio.AbstractEventLoop:
    """Получить общий цикл событий, при первом вызове запустить его поток"""
    global _loop
    with _loop_lock:
        if _loop is None or _loop.is_closed():
            loop = asyncio.new_event_loop()
            threading.Thread(target=loop.run_forever, name='async-loop', daemon=True).start()
            _loop = loop
    return _loop


def run_async(coro):
    """Выполнить корутину в общем цикле и дождаться результата в текущем потоке"""
    # Контекст вызывающего потока (запрос Flask) переносится в задачу
    return asyncio.run_coroutine_threadsafe(coro, get_loop()).result()


def async_route(f):
    @wraps(f)
    def wrapped(*args, **kwargs):
        # Исключения пробрасываются дальше, к обработчикам ошибок Flask
        return run_async(f(*args, **kwargs))

    return wrapped


def get_storage():
    """Хранилище, созданное при старте приложения"""
    return current_app.extensions['storage']


def validate_body(model):
    """Проверить JSON тела запроса моделью; ValidationError уходит в обработчик 400"""
    return model.model_validate(request.get_json(silent=True) or {})

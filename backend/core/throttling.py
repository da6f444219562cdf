from django.conf import settings
from rest_framework.throttling import AnonRateThrottle, SimpleRateThrottle


class WindowedIPThrottle(SimpleRateThrottle):
    """
    Fixed-size window per client IP for every API request.

    Window and ceiling come from RATE_LIMIT_WINDOW_SECONDS and
    RATE_LIMIT_MAX_REQUESTS, so windows longer than one DRF period unit
    (e.g. 15 minutes) can be expressed.
    """

    scope = "api_ip"

    def get_rate(self):
        return f"{settings.RATE_LIMIT_MAX_REQUESTS}/{settings.RATE_LIMIT_WINDOW_SECONDS}"

    def parse_rate(self, rate):
        num, window = rate.split("/")
        return int(num), int(window)

    def get_cache_key(self, request, view):
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }


class LoginThrottle(AnonRateThrottle):
    scope = "login"

    def get_rate(self):
        return settings.LOGIN_RATE_LIMIT

    def get_cache_key(self, request, view):
        return self.cache_format % {
            "scope": self.scope,
            "ident": self.get_ident(request),
        }

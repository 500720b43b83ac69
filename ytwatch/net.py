# ytwatch/net.py
import requests
from requests.adapters import HTTPAdapter

DEFAULT_TIMEOUT = (12, 30)  # (connect, read) seconds
DEFAULT_APPLICATION_NAME = "ytwatch"


def make_session(access_token: str, application_name: str = DEFAULT_APPLICATION_NAME, pool_size: int = 10) -> requests.Session:
    """Session carrying the bearer token. Retries are left to the scheduler."""
    s = requests.Session()
    s.headers.update({
        "Authorization": f"Bearer {access_token}",
        "User-Agent": f"{application_name} (gzip)",
        "Accept": "application/json",
        "Accept-Encoding": "gzip, deflate",
    })
    adapter = HTTPAdapter(max_retries=0, pool_connections=pool_size, pool_maxsize=pool_size)
    s.mount("http://", adapter)
    s.mount("https://", adapter)
    return s

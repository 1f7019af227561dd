"""HTTP download client with retries and timeouts."""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

import requests
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from ruian_addresses.common.config_loader import RetryConfig, TimeoutConfig
from ruian_addresses.common.constants import USER_AGENT
from ruian_addresses.common.errors import PipelineError
from ruian_addresses.common.fs import ensure_dir

RETRYABLE_STATUS_CODES = {408, 425, 429, 500, 502, 503, 504}
CHUNK_SIZE = 1024 * 128


class HttpRequestError(PipelineError):
    error_code = "HTTP_ERROR"


class RetryableHttpError(HttpRequestError):
    pass


class HttpClient:
    def __init__(
        self,
        *,
        timeout: TimeoutConfig | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self.timeout = timeout or TimeoutConfig()
        self.retry = retry or RetryConfig()
        self.session = requests.Session()

    def close(self) -> None:
        self.session.close()

    def __enter__(self) -> "HttpClient":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _raise_for_status_or_retry(self, response: requests.Response) -> None:
        status = response.status_code
        if status in RETRYABLE_STATUS_CODES:
            raise RetryableHttpError(f"Retryable HTTP status: {status}")
        if status >= 400:
            raise HttpRequestError(f"HTTP status: {status}")

    def _download(self, url: str, target_path: Path) -> Path:
        partial_path = target_path.with_name(target_path.name + ".part")
        try:
            response = self.session.request(
                method="GET",
                url=url,
                headers={"User-Agent": USER_AGENT, "Accept": "*/*"},
                timeout=(self.timeout.connect, self.timeout.read),
                stream=True,
            )
        except (requests.ConnectionError, requests.Timeout) as exc:
            raise RetryableHttpError(f"Transport failure for {url}: {exc}") from exc
        with response:
            self._raise_for_status_or_retry(response)

            ensure_dir(target_path.parent)
            try:
                with partial_path.open("wb") as f:
                    for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                        if chunk:
                            f.write(chunk)
            except requests.RequestException as exc:
                partial_path.unlink(missing_ok=True)
                raise RetryableHttpError(f"Download interrupted for {url}: {exc}") from exc
        partial_path.replace(target_path)
        return target_path

    def download(self, url: str, target_path: Path) -> Path:
        @retry(
            stop=stop_after_attempt(self.retry.max_attempts),
            wait=wait_exponential_jitter(
                initial=self.retry.multiplier,
                max=self.retry.max_wait,
                jitter=1.0,
            ),
            retry=retry_if_exception_type(RetryableHttpError),
            reraise=True,
        )
        def _wrapped() -> Path:
            return self._download(url, target_path)

        return _wrapped()

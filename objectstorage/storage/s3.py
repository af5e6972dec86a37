"""Minimal S3-compatible API client using requests (works with DigitalOcean Spaces)."""

from dataclasses import dataclass, field
from urllib.parse import quote, urlsplit
from xml.etree import ElementTree

import requests
from requests.adapters import HTTPAdapter
from requests.packages.urllib3 import exceptions as urllib3_exceptions
from requests.packages.urllib3.util.retry import Retry
from requests_aws4auth import AWS4Auth

S3_NAMESPACE = {"s3": "http://s3.amazonaws.com/doc/2006-03-01/"}

REDIRECT_CODES = (301, 302, 307, 308)


class S3ClientError(Exception):
    """Error returned by the S3 API or raised by the HTTP transport."""

    def __init__(self, message: str, status_code: int | None = None, code: str | None = None):
        self.status_code = status_code
        self.code = code
        super().__init__(message)


class NoSuchKey(S3ClientError):
    """The object does not exist."""
    pass


@dataclass
class ListPage:
    """One page of a ListObjectsV2 response."""

    keys: list[str] = field(default_factory=list)
    is_truncated: bool = False
    next_continuation_token: str | None = None


class StreamingBody:
    """Readable body of a GetObject response.

    Closing the body releases the underlying connection back to the pool.
    """

    def __init__(self, response: requests.Response):
        self._response = response

    def read(self, amt: int | None = None) -> bytes:
        try:
            return self._response.raw.read(amt, decode_content=True)
        except (urllib3_exceptions.HTTPError, requests.exceptions.RequestException) as e:
            raise S3ClientError(f"reading object body failed: {e}") from e

    def close(self) -> None:
        self._response.close()

    def __enter__(self) -> "StreamingBody":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class S3Client:
    """S3 API client signing requests with AWS4Auth.

    Building the client performs no I/O.
    """

    def __init__(
        self,
        endpoint_url: str,
        region: str,
        access_key: str,
        secret_key: str,
        use_path_style: bool = False,
        timeout: int = 300,
        max_retries: int = 0,
    ):
        self.endpoint_url = endpoint_url.rstrip("/")
        self.region = region
        self.use_path_style = use_path_style
        self.timeout = timeout

        self.session = requests.Session()
        self.session.auth = AWS4Auth(access_key, secret_key, region, "s3")

        # Transport-level retries only; callers see a single attempt
        retry_strategy = Retry(
            total=max_retries,
            backoff_factor=2,
            status_forcelist=[500, 502, 503, 504],
            allowed_methods=["HEAD", "GET"],
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retry_strategy)
        self.session.mount("http://", adapter)
        self.session.mount("https://", adapter)

        # Disable automatic redirect following
        self.session.max_redirects = 0

    def bucket_url(self, bucket: str) -> str:
        """Return the bucket URL in path-style or virtual-host-style form."""
        if self.use_path_style:
            return f"{self.endpoint_url}/{bucket}"
        parts = urlsplit(self.endpoint_url)
        return f"{parts.scheme}://{bucket}.{parts.netloc}{parts.path}"

    def object_url(self, bucket: str, key: str) -> str:
        return f"{self.bucket_url(bucket)}/{quote(key, safe='/~')}"

    def get_object(self, bucket: str, key: str) -> StreamingBody:
        """Fetch an object. The returned body must be closed by the caller."""
        resp = self._request("GET", self.object_url(bucket, key), stream=True)
        if resp.status_code != 200:
            try:
                self._raise_for_response(resp, f"GetObject {key}")
            finally:
                resp.close()
        return StreamingBody(resp)

    def put_object(self, bucket: str, key: str, body: bytes) -> None:
        resp = self._request(
            "PUT",
            self.object_url(bucket, key),
            data=body,
            headers={"Content-Type": "application/octet-stream"},
        )
        if resp.status_code not in (200, 201):
            self._raise_for_response(resp, f"PutObject {key}")

    def list_objects_v2(
        self, bucket: str, prefix: str = "", continuation_token: str | None = None
    ) -> ListPage:
        """Fetch a single page of keys starting with prefix."""
        params = {"list-type": "2", "prefix": prefix}
        if continuation_token:
            params["continuation-token"] = continuation_token

        resp = self._request("GET", self.bucket_url(bucket) + "/", params=params)
        if resp.status_code != 200:
            self._raise_for_response(resp, f"ListObjectsV2 {prefix}")

        try:
            root = ElementTree.fromstring(resp.content)
        except ElementTree.ParseError as e:
            raise S3ClientError(f"ListObjectsV2 returned malformed XML: {e}") from e

        page = ListPage()
        for content in root.findall(".//s3:Contents", S3_NAMESPACE):
            key_elem = content.find("s3:Key", S3_NAMESPACE)
            if key_elem is not None and key_elem.text:
                page.keys.append(key_elem.text)

        is_truncated = root.find(".//s3:IsTruncated", S3_NAMESPACE)
        if is_truncated is not None and is_truncated.text == "true":
            token_elem = root.find(".//s3:NextContinuationToken", S3_NAMESPACE)
            if token_elem is not None and token_elem.text:
                page.is_truncated = True
                page.next_continuation_token = token_elem.text
        return page

    def _request(self, method: str, url: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(
                method, url, timeout=self.timeout, allow_redirects=False, **kwargs
            )
        except requests.exceptions.RequestException as e:
            raise S3ClientError(f"{method} {url} failed: {e}") from e

    @staticmethod
    def _raise_for_response(resp: requests.Response, action: str) -> None:
        if resp.status_code in REDIRECT_CODES:
            location = resp.headers.get("Location", "unknown")
            raise S3ClientError(
                f"{action} redirected to: {location}", status_code=resp.status_code
            )

        code = None
        message = resp.reason or ""
        if resp.content:
            try:
                root = ElementTree.fromstring(resp.content)
            except ElementTree.ParseError:
                root = None
            if root is not None:
                code = root.findtext("Code")
                message = root.findtext("Message") or message

        # 404 with another code (e.g. NoSuchBucket) is not a missing key
        missing_key = code == "NoSuchKey" or (resp.status_code == 404 and code is None)
        error_cls = NoSuchKey if missing_key else S3ClientError
        raise error_cls(
            f"{action} failed: {resp.status_code} {code or ''} {message}".strip(),
            status_code=resp.status_code,
            code=code,
        )


class ListObjectsV2Paginator:
    """Walks ListObjectsV2 pages for one prefix.

    A paginator is single-use: create a new one for every listing.
    """

    def __init__(self, client: S3Client, bucket: str, prefix: str = ""):
        self.client = client
        self.bucket = bucket
        self.prefix = prefix
        self._token: str | None = None
        self._first_page = True

    @property
    def has_more_pages(self) -> bool:
        return self._first_page or self._token is not None

    def next_page(self) -> ListPage:
        if not self.has_more_pages:
            raise S3ClientError(f"no more pages for prefix {self.prefix!r}")
        page = self.client.list_objects_v2(self.bucket, self.prefix, self._token)
        self._first_page = False
        self._token = page.next_continuation_token if page.is_truncated else None
        return page

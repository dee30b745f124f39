import base64
import pytest
import httpx
from urllib.parse import urlparse, parse_qs
from dei_badger.config import ProviderConfig
from dei_badger.providers import ProviderNotConfigured
from dei_badger.providers.github import GithubProvider

@pytest.fixture
def github():
    return GithubProvider(ProviderConfig(
        name="github",
        client_id="gh-client",
        client_secret="gh-secret",
        redirect_uri="http://localhost:8000/github/callback",
        api_url="https://api.github.com",
        oauth_url="https://github.com",
    ))

def test_authorization_redirect(github):
    """
    WHY: Users start the OAuth flow from this URL; it must carry our client id and scopes.
    HOW: Build the redirect and parse its query string.
    EXPECTED: GitHub authorize endpoint with client_id, `user,repo` scopes and the redirect URI.
    """
    url = github.build_authorization_redirect(state="abc")
    parsed = urlparse(url)
    query = parse_qs(parsed.query)

    assert parsed.netloc == "github.com"
    assert parsed.path == "/login/oauth/authorize"
    assert query["client_id"] == ["gh-client"]
    assert query["scope"] == ["user,repo"]
    assert query["redirect_uri"] == ["http://localhost:8000/github/callback"]
    assert query["state"] == ["abc"]

def test_authorization_redirect_not_configured():
    """
    WHY: Without a client id the redirect would send users to a broken consent page.
    HOW: Build a provider with no client id and ask for the redirect.
    EXPECTED: ProviderNotConfigured with a user-facing message.
    """
    provider = GithubProvider(ProviderConfig(name="github", api_url="https://api.github.com", oauth_url="https://github.com"))
    with pytest.raises(ProviderNotConfigured, match="GitHub provider is not configured"):
        provider.build_authorization_redirect()

def test_exchange_code_for_token(github, mock_httpx, json_response):
    """
    WHY: The callback must turn the OAuth code into an access token.
    HOW: Mock the token endpoint to return an access_token.
    EXPECTED: Result holds the token; request carries client credentials and the code.
    """
    mock_httpx.post.return_value = json_response({"access_token": "gho_123", "token_type": "bearer"})

    token = github.exchange_code_for_token("the-code")

    assert token.ok
    assert token.result == "gho_123"
    args, kwargs = mock_httpx.post.call_args
    assert args[0] == "https://github.com/login/oauth/access_token"
    assert kwargs["json"]["code"] == "the-code"
    assert kwargs["json"]["client_secret"] == "gh-secret"

def test_exchange_code_bad_verification_code(github, mock_httpx, json_response):
    """
    WHY: GitHub reports expired codes with HTTP 200 and an error body, not an HTTP error.
    HOW: Mock the token endpoint to return `bad_verification_code`.
    EXPECTED: No token; the error description is returned as data.
    """
    mock_httpx.post.return_value = json_response({
        "error": "bad_verification_code",
        "error_description": "The code passed is incorrect or expired.",
    })

    token = github.exchange_code_for_token("stale")

    assert token.result is None
    assert token.errors == ["The code passed is incorrect or expired."]

def test_exchange_code_network_error_is_data(github, mock_httpx):
    """
    WHY: Provider failures must never raise past the adapter.
    HOW: Make the POST raise httpx.ConnectError.
    EXPECTED: A result with one error message and no token.
    """
    mock_httpx.post.side_effect = httpx.ConnectError("connection refused")

    token = github.exchange_code_for_token("code")

    assert token.result is None
    assert token.errors == ["connection refused"]

def test_fetch_authenticated_user(github, mock_httpx, json_response):
    """
    WHY: We need the user's login, name, email and id to address badge mail.
    HOW: Mock GET /user.
    EXPECTED: UserInfo built from the payload, request authorized with the token.
    """
    mock_httpx.get.return_value = json_response({"login": "octocat", "name": "The Octocat", "email": "octo@github.com", "id": 583231})

    user = github.fetch_authenticated_user("gho_123")

    assert user.ok
    assert user.result.login == "octocat"
    assert user.result.id == 583231
    _, kwargs = mock_httpx.get.call_args
    assert kwargs["headers"]["Authorization"] == "Bearer gho_123"

def test_fetch_user_repositories_paginates(github, mock_httpx, json_response):
    """
    WHY: Users can own more than one page of public repositories.
    HOW: Return pages of 100, 100 and 0 repositories.
    EXPECTED: Exactly 200 repositories, pages requested 1..3 with visibility=public.
    """
    page_1 = [{"id": i, "full_name": f"octocat/repo-{i}"} for i in range(100)]
    page_2 = [{"id": i, "full_name": f"octocat/repo-{i}"} for i in range(100, 200)]
    mock_httpx.get.side_effect = [json_response(page_1), json_response(page_2), json_response([])]

    repos = github.fetch_user_repositories("gho_123")

    assert repos.ok
    assert len(repos.result) == 200
    assert repos.result[0].full_name == "octocat/repo-0"
    assert repos.result[-1].id == 199
    pages = [c.kwargs["params"]["page"] for c in mock_httpx.get.call_args_list]
    assert pages == [1, 2, 3]
    assert mock_httpx.get.call_args_list[0].kwargs["params"]["visibility"] == "public"
    assert mock_httpx.get.call_args_list[0].kwargs["params"]["per_page"] == 100

def test_fetch_repository_info(github, mock_httpx, json_response):
    """
    WHY: Scans start from numeric ids; we need url, owner/name and default branch.
    HOW: Mock GET /repositories/{id}.
    EXPECTED: RepositoryInfo whose locator is the full name.
    """
    mock_httpx.get.return_value = json_response({
        "id": 1296269,
        "html_url": "https://github.com/octocat/Hello-World",
        "full_name": "octocat/Hello-World",
        "default_branch": "main",
    })

    info = github.fetch_repository_info(1296269)

    assert info.ok
    assert info.result.url == "https://github.com/octocat/Hello-World"
    assert info.result.locator == "octocat/Hello-World"
    assert info.result.default_branch == "main"
    assert mock_httpx.get.call_args.args[0] == "https://api.github.com/repositories/1296269"

def test_fetch_file_snapshot_decodes_content(github, mock_httpx, json_response):
    """
    WHY: The contents API returns base64 wrapped at 60 chars; badges need the real text.
    HOW: Mock GET /repos/{owner}/{repo}/contents/DEI.md with wrapped base64.
    EXPECTED: Decoded content, the file SHA as revision, ref pinned to the branch.
    """
    text = "# Diversity, Equity & Inclusion\n\n" + "We welcome everyone. " * 10
    encoded = base64.b64encode(text.encode()).decode()
    wrapped = "\n".join(encoded[i:i + 60] for i in range(0, len(encoded), 60))
    mock_httpx.get.return_value = json_response({"sha": "3d21ec53a331", "content": wrapped, "encoding": "base64"})

    snapshot = github.fetch_file_snapshot("octocat/Hello-World", "DEI.md", "main")

    assert snapshot.ok
    assert snapshot.result.content == text
    assert snapshot.result.revision == "3d21ec53a331"
    args, kwargs = mock_httpx.get.call_args
    assert args[0] == "https://api.github.com/repos/octocat/Hello-World/contents/DEI.md"
    assert kwargs["params"] == {"ref": "main"}

def test_fetch_file_snapshot_missing_file(github, mock_httpx):
    """
    WHY: A missing DEI.md is a normal outcome, reported as data.
    HOW: Make raise_for_status raise a 404 HTTPStatusError.
    EXPECTED: No snapshot, one error string.
    """
    request = httpx.Request("GET", "https://api.github.com/repos/octocat/Hello-World/contents/DEI.md")
    response = httpx.Response(404, request=request)
    mock_httpx.get.return_value.raise_for_status.side_effect = httpx.HTTPStatusError(
        "404 Not Found", request=request, response=response
    )

    snapshot = github.fetch_file_snapshot("octocat/Hello-World", "DEI.md")

    assert snapshot.result is None
    assert snapshot.errors == ["404 Not Found"]

def test_fetch_file_snapshot_rejects_numeric_locator(github, mock_httpx):
    """
    WHY: The contents API needs owner/name; a bare id would build a bogus URL.
    HOW: Pass a numeric identifier.
    EXPECTED: An error result and no HTTP call.
    """
    snapshot = github.fetch_file_snapshot(1296269, "DEI.md")

    assert not snapshot.ok
    mock_httpx.get.assert_not_called()

def test_fetch_file_snapshot_replaces_invalid_utf8(github, mock_httpx, json_response):
    """
    WHY: A DEI.md saved in another encoding is still a DEI.md, not a missing file.
    HOW: Serve base64 of bytes that are not valid UTF-8.
    EXPECTED: The snapshot succeeds; the bad byte becomes U+FFFD.
    """
    encoded = base64.b64encode(b"Caf\xe9 for all").decode()
    mock_httpx.get.return_value = json_response({"sha": "9f1c", "content": encoded, "encoding": "base64"})

    snapshot = github.fetch_file_snapshot("octocat/Hello-World", "DEI.md", "main")

    assert snapshot.ok
    assert snapshot.result.content == "Caf\ufffd for all"
    assert snapshot.result.revision == "9f1c"

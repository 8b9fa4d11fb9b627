"""restcli -- a declarative HTTP API client and the command line built on it.

API operations are declared as data (verb, path template, body encoder),
grouped into namespaces, and bound to an :class:`~restcli.client.ApiClient`
that owns the base URL and bearer token. Every registered method is also
exposed by the ``restcli`` command line as a sub-command.

Typical use::

    async with ApiClient("https://api.example.com", token) as client:
        resp = await client.auth.check()
        print(resp.status, resp.authenticated)

Modules:
    resource: Path templates, method descriptors, and namespaces.
    client: The dispatching client and the immutable response wrapper.
    resources: The account, auth, and check resources.
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG-aware configuration and token file management.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.3.0"

"""Built-in CLI sub-commands for restcli.

* :mod:`~restcli.commands.login` -- store or remove the bearer token.
* :mod:`~restcli.commands.config` -- view and modify global settings.
* :mod:`~restcli.commands.common` -- client construction, calls, and
  response rendering shared with the generated resource commands.

Resource commands themselves are generated by
:mod:`restcli.generator.command_tree`.
"""

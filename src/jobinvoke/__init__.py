"""
Local invocation of scheduled units of work under a security identity.

The submodules are:
 - low -- data model of an invocation request and its outcome
 - lifecycle -- fire-and-forget publishing of work item lifecycle events
 - params -- sanitizing the parameter map and resolving stream providers
 - security -- identity scoping, ie, running a callable as anonymous or as a user
 - runner -- executing the unit of work itself inside the identity scope
 - invoker -- the orchestration, the single `ActionInvoker.invoke` entrypoint
"""

from jobinvoke.version import __version__

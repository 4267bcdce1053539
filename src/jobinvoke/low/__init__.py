"""
Low level representation of an invocation -- not expected to be user facing.

Used to stabilise the contract between schedulers/triggers and the invoker: the
request (ActionDetails), the outcome (InvokeStatus) and the reserved parameter keys.
"""

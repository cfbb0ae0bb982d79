"""Authentication and authorization.

Learn: one authentication path — email/password login returns a signed
JWT, and every protected request carries it as a Bearer token. The
identity dependency turns the token into a Principal once per request;
the ownership guard compares that Principal to a resource's creator
before any mutation.
"""

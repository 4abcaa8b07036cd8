"""Authentication and authorization.

Learn: Users register with email/password and log in to receive a signed
JWT access token. Every page route depends on get_current_user, which
verifies the token and yields a CurrentIdentity used for owner scoping.

Sessions are stateless: nothing about a login is stored server-side.
Logging out means the client throws its token away.
"""

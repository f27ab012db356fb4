"""
Cross-cutting request pipeline.

Registered in opsdesk.main, outermost first:
- RequestLoggerMiddleware: correlation id, start/completion events
- ErrorLoggingMiddleware: logs unhandled errors with request context, re-raises
- EdgeAuthMiddleware: protected-prefix cookie guard, security headers

Route-level validation is a dependency: opsdesk.middleware.validation.validate().
"""

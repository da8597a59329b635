"""
Unit tests for the retry layer.

Test individual components in isolation:
- RetryState storage on requests
- Delay strategies and retry conditions
- RetryConfiguration validation
- Interceptor decisions (with stub dispatch)
- attach_retry / client factory
- Settings and logging configuration
"""

# nosec B101


from infrastructure.http.urls import join_url, strip_trailing_slash, with_query


def test_strip_trailing_slash_removes_all_trailing_slashes():
    assert strip_trailing_slash('https://api.example.com///') == 'https://api.example.com'
    assert strip_trailing_slash('https://api.example.com') == 'https://api.example.com'


def test_join_url_uses_single_slash():
    assert join_url('https://api.example.com/', '/latest') == 'https://api.example.com/latest'
    assert join_url('https://api.example.com', 'symbols') == 'https://api.example.com/symbols'
    assert join_url('https://api.example.com/v1/', 'latest') == 'https://api.example.com/v1/latest'


def test_with_query_without_params_returns_url():
    assert with_query('https://api.example.com/latest', None) == 'https://api.example.com/latest'
    assert with_query('https://api.example.com/latest', {}) == 'https://api.example.com/latest'
    assert with_query('https://api.example.com/latest', {'base': None}) == 'https://api.example.com/latest'


def test_with_query_encodes_values():
    url = with_query('https://api.example.com/latest', {'base': 'USD', 'symbols': 'EUR,GBP', 'raw': True})

    assert url == 'https://api.example.com/latest?base=USD&symbols=EUR%2CGBP&raw=true'

"""Unit tests for field validators in validators.py

Test coverage includes:

1. URL validation
   - Accepts absolute HTTP(S) URLs and trims surrounding whitespace.
   - Rejects empty, malformed, non-HTTP(S) and over-long URLs.

2. Alias validation
   - Keeps the alias as typed and exposes its case-folded comparison form.
   - Rejects empty, over-long and forbidden-character aliases.

3. Folder validation
   - Empty means root and is always valid.
   - Underscores are allowed, slashes and spaces are not.

4. Tag validation
   - Single tags must already be lowercase.
   - Tag collections are split, trimmed, deduplicated and sorted.
   - The tag count limit is enforced.

5. Result contract
   - unwrap() raises the matching ValidationError subclass.
   - Wrong argument types are contract violations (beartype).

6. Composite key helpers
"""

import pytest
from beartype.roar import BeartypeCallHintParamViolation

from aliasnav.exceptions import InvalidUrlError, InvalidAliasError, InvalidFolderError, InvalidTagError
from aliasnav.utils.validators import (
    fold,
    full_alias,
    composite_key,
    validate_url,
    validate_alias,
    validate_folder,
    validate_tag,
    validate_tags,
)


# -------------------------------
# 1. URL validation
# -------------------------------


@pytest.mark.parametrize(
    'url',
    [
        'https://work.com/meet',
        'http://localhost:8080/path?q=1#frag',
        'HTTPS://Example.COM',
    ],
)
def test_validate_url_accepts_http_urls(url):
    result = validate_url(url)
    assert result.valid
    assert result.value == url
    assert result.error is None


def test_validate_url_trims_whitespace():
    assert validate_url('  https://example.com  ').value == 'https://example.com'


@pytest.mark.parametrize(
    'url, error',
    [
        (None, 'URL is required'),
        ('', 'URL is required'),
        ('   ', 'URL is required'),
        ('ftp://example.com', 'URL must use HTTP or HTTPS protocol'),
        ('javascript:alert(1)', 'URL must use HTTP or HTTPS protocol'),
        ('example.com', 'URL must use HTTP or HTTPS protocol'),
        ('https://', 'Invalid URL format'),
        ('https://exa mple.com', 'Invalid URL format'),
        ('http://example.com:99999', 'Invalid URL format'),
    ],
)
def test_validate_url_rejects_invalid_urls(url, error):
    result = validate_url(url)
    assert not result.valid
    assert result.error == error
    assert result.kind is InvalidUrlError


def test_validate_url_length_limit():
    base = 'https://example.com/'
    assert validate_url(base + 'a' * (2048 - len(base))).valid
    result = validate_url(base + 'a' * (2049 - len(base)))
    assert not result.valid
    assert 'too long' in result.error


# -------------------------------
# 2. Alias validation
# -------------------------------


def test_validate_alias_preserves_case():
    result = validate_alias(' Meet-1 ')
    assert result.valid
    assert result.value == 'Meet-1'
    assert result.normalized == 'meet-1'


@pytest.mark.parametrize(
    'alias, error',
    [
        (None, 'Alias is required'),
        ('', 'Alias is required'),
        ('  ', 'Alias is required'),
        ('a' * 51, 'Alias must be max 50 characters'),
        ('no spaces', 'Alias can only contain letters, numbers, and hyphens (-)'),
        ('work/meet', 'Alias can only contain letters, numbers, and hyphens (-)'),
        ('snake_case', 'Alias can only contain letters, numbers, and hyphens (-)'),
    ],
)
def test_validate_alias_rejects_invalid_aliases(alias, error):
    result = validate_alias(alias)
    assert not result.valid
    assert result.error == error
    assert result.kind is InvalidAliasError


def test_validate_alias_length_bounds():
    assert validate_alias('a').valid
    assert validate_alias('a' * 50).valid


# -------------------------------
# 3. Folder validation
# -------------------------------


@pytest.mark.parametrize('folder', [None, '', '   '])
def test_validate_folder_empty_means_root(folder):
    result = validate_folder(folder)
    assert result.valid
    assert result.value == ''
    assert result.normalized == ''


def test_validate_folder_allows_underscore():
    result = validate_folder('Team_Docs')
    assert result.valid
    assert result.value == 'Team_Docs'
    assert result.normalized == 'team_docs'


@pytest.mark.parametrize('folder', ['a' * 31, 'nested/folder', 'with space', 'dot.ted'])
def test_validate_folder_rejects_invalid_names(folder):
    result = validate_folder(folder)
    assert not result.valid
    assert result.kind is InvalidFolderError


# -------------------------------
# 4. Tag validation
# -------------------------------


def test_validate_tag_requires_lowercase():
    result = validate_tag('Video')
    assert not result.valid
    assert result.error == "Tags must be lowercase only (given: 'Video')"
    assert result.kind is InvalidTagError


@pytest.mark.parametrize('tag', ['', 'a' * 21, 'under_score', 'spa ce'])
def test_validate_tag_rejects_invalid_tags(tag):
    assert not validate_tag(tag).valid


def test_validate_tags_from_csv():
    result = validate_tags(' work, video,,work , ')
    assert result.valid
    assert result.value == ('video', 'work')


def test_validate_tags_from_list():
    assert validate_tags(['zeta', 'alpha', 'alpha']).value == ('alpha', 'zeta')


@pytest.mark.parametrize('tags', [None, '', [], ()])
def test_validate_tags_empty(tags):
    result = validate_tags(tags)
    assert result.valid
    assert result.value == ()


def test_validate_tags_returns_first_error():
    result = validate_tags(['ok', 'Bad', 'also_bad'])
    assert not result.valid
    assert result.error == "Tags must be lowercase only (given: 'Bad')"


def test_validate_tags_count_limit():
    assert validate_tags([f'tag-{i}' for i in range(50)]).valid
    result = validate_tags([f'tag-{i}' for i in range(51)])
    assert not result.valid
    assert result.error == 'Maximum 50 tags allowed'


def test_validate_tags_rejects_non_string_entries():
    result = validate_tags(['ok', 42])
    assert not result.valid
    assert result.kind is InvalidTagError


# -------------------------------
# 5. Result contract
# -------------------------------


def test_unwrap_returns_value():
    assert validate_alias('meet').unwrap() == 'meet'


def test_unwrap_raises_matching_error():
    with pytest.raises(InvalidAliasError, match='Alias is required'):
        validate_alias('').unwrap()


def test_result_truthiness():
    assert validate_alias('meet')
    assert not validate_alias('')


@pytest.mark.parametrize(
    'validator, argument',
    [
        (validate_url, 42),
        (validate_alias, 42),
        (validate_folder, ['work']),
        (validate_tag, 1.5),
        (validate_tags, 42),
    ],
)
def test_wrong_argument_type_is_contract_violation(validator, argument):
    with pytest.raises(BeartypeCallHintParamViolation):
        validator(argument)


# -------------------------------
# 6. Composite key helpers
# -------------------------------


def test_fold():
    assert fold('  WoRk ') == 'work'
    assert fold(None) == ''


@pytest.mark.parametrize(
    'folder, alias, expected_full, expected_key',
    [
        ('Work', 'Meet', 'Work/Meet', 'work/meet'),
        ('', 'Meet', 'Meet', 'meet'),
        ('  ', ' meet ', 'meet', 'meet'),
    ],
)
def test_full_alias_and_composite_key(folder, alias, expected_full, expected_key):
    assert full_alias(folder, alias) == expected_full
    assert composite_key(folder, alias) == expected_key

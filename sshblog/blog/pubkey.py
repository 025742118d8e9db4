"""
Public key comparison and parsing for ssh-blog.

Keys are stored as the raw text given at registration, in the
``authorized_keys`` line format ``<key-type> <base64-body> [comment]``,
and compared by :func:`keys_match`, which tolerates incidental
formatting differences and ignores the trailing comment.
"""
# std imports
import binascii
import hashlib
import base64

# 3rd-party
import paramiko

#: conventional prefix of openssh public key types, ``ssh-rsa``,
#: ``ssh-ed25519``, and so on.
DEFAULT_KEY_PREFIX = 'ssh-'


def get_key_prefix():
    """ Return ``key_prefix`` of ini ``[auth]`` section. """
    from sshblog.blog.ini import get_ini
    return get_ini(section='auth', key='key_prefix') or DEFAULT_KEY_PREFIX


def normalize_key(key_text):
    """ Return ``key_text`` trimmed, with embedded newlines as spaces. """
    return key_text.strip().replace('\r\n', ' ').replace('\n', ' ')


def keys_match(stored_key, presented_key):
    """
    Whether ``stored_key`` and ``presented_key`` denote the same credential.

    When both sides have at least a key type and body, only those two
    fields are compared and any comment is ignored.  Otherwise the
    normalized strings must be equal.  Never raises.

    :rtype: bool
    """
    if not isinstance(stored_key, str) or not isinstance(presented_key, str):
        return False
    stored, presented = normalize_key(stored_key), normalize_key(presented_key)
    stored_parts, presented_parts = stored.split(), presented.split()
    if len(stored_parts) >= 2 and len(presented_parts) >= 2:
        return (stored_parts[0] == presented_parts[0] and
                stored_parts[1] == presented_parts[1])
    return stored == presented


def looks_like_pubkey(text, prefix=None):
    """ Whether ``text`` begins with the public key type prefix. """
    prefix = prefix or get_key_prefix()
    return bool(text) and text.strip().startswith(prefix)


def parse_public_key(key_text):
    """
    Return :class:`paramiko.PublicBlob` of a public key line.

    :raises ValueError: malformed key type, encoding, or body.
    """
    try:
        return paramiko.PublicBlob.from_string(normalize_key(key_text))
    except (binascii.Error, paramiko.SSHException, UnicodeError) as err:
        raise ValueError('Malformed public key: {0}'.format(err))


def extract_public_key(text, prefix=None):
    """
    Find and return a public key embedded within free ``text``.

    Each token beginning with the key type ``prefix`` is tried along with
    the token that follows as its body; the first pair that parses as a
    public key whose encoded type matches is returned as
    ``'<key-type> <base64-body>'``.  Returns None if no such pair is found.
    """
    prefix = prefix or get_key_prefix()
    tokens = normalize_key(text or u'').split()
    for idx, token in enumerate(tokens[:-1]):
        if not token.startswith(prefix):
            continue
        candidate = u'{0} {1}'.format(token, tokens[idx + 1])
        try:
            parse_public_key(candidate)
        except ValueError:
            continue
        return candidate
    return None


def fingerprint(key_text):
    """
    Return openssh-style ``SHA256:`` fingerprint of ``key_text``.

    Used in log messages in place of the full key.  Returns None when
    the key body cannot be decoded.
    """
    parts = normalize_key(key_text or u'').split()
    if len(parts) < 2:
        return None
    try:
        key_bytes = base64.b64decode(parts[1].encode('ascii'), validate=True)
    except (binascii.Error, UnicodeError):
        return None
    digest = hashlib.sha256(key_bytes).digest()
    return u'SHA256:{0}'.format(
        base64.b64encode(digest).decode('ascii').rstrip('='))

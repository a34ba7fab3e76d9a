# sofa: typed documents for a lightweight Couch
# Copyright (C) 2011-2016 Novacut Inc
#
# This file is part of `sofa`.
#
# `sofa` is free software: you can redistribute it and/or modify it under
# the terms of the GNU Lesser General Public License as published by the Free
# Software Foundation, either version 3 of the License, or (at your option) any
# later version.
#
# `sofa` is distributed in the hope that it will be useful, but WITHOUT
# ANY WARRANTY; without even the implied warranty of MERCHANTABILITY or FITNESS
# FOR A PARTICULAR PURPOSE.  See the GNU Lesser General Public License for more
# details.
#
# You should have received a copy of the GNU Lesser General Public License along
# with `sofa`.  If not, see <http://www.gnu.org/licenses/>.
#
# Authors:
#   Jason Gerard DeRose <jderose@novacut.com>
#

"""
`sofa` - typed documents for a lightweight Couch.

Sofa is an asynchronous adapter for storing typed values as documents in
CouchDB (or anything that speaks its REST API).  Each operation is one HTTP
request, and each response status is mapped onto exactly one outcome:

    * a result (a `Doc`, a `WriteResult`, a `Database`, ...)

    * ``None`` when the thing simply isn't there (404 on a read or delete)

    * an exception from the `HTTPError` hierarchy for everything else

Nothing is retried, and nothing is cached.  Optimistic concurrency is left to
CouchDB: write with a stale revision and you get a `Conflict`.

For example:

>>> import asyncio
>>> async def demo():
...     async with Server('http://localhost:5984/') as server:
...         db = await server.create_database('shop')
...         items = db.documents()
...         r = await items.put('item-1', {'name': 'pen'})
...         return await items.get('item-1')
...
>>> asyncio.run(demo())  #doctest: +SKIP
Doc(id='item-1', rev='1-...', model={'name': 'pen'})
"""

from base64 import b64encode
import json
import ssl
import platform
import dataclasses
from collections import namedtuple
from urllib.parse import urlparse, quote
import logging

import httpx


__all__ = (
    'Server',
    'Database',
    'Documents',
    'Codec',

    'BadRequest',
    'InvalidName',
    'AuthorizationRequired',
    'ReadPrivilegeRequired',
    'WritePrivilegeRequired',
    'AdminPrivilegeRequired',
    'DatabaseNotFound',
    'Conflict',
    'ViewFunctionError',
    'UnexpectedStatus',
    'NonTextBody',
    'DeserializationError',
)

__version__ = '26.10.0'
log = logging.getLogger()
USER_AGENT = 'Sofa/{} (Python {}; {})'.format(__version__,
    platform.python_version(), platform.machine()
)

HTTP_IPv4_URL = 'http://127.0.0.1:5984/'
HTTPS_IPv4_URL = 'https://127.0.0.1:6984/'
HTTP_IPv6_URL = 'http://[::1]:5984/'
HTTPS_IPv6_URL = 'https://[::1]:6984/'
URL_CONSTANTS = (
    HTTP_IPv4_URL,
    HTTPS_IPv4_URL,
    HTTP_IPv6_URL,
    HTTPS_IPv6_URL,
)
DEFAULT_URL = HTTP_IPv4_URL

Doc = namedtuple('Doc', 'id rev model')
Head = namedtuple('Head', 'rev headers')
WriteResult = namedtuple('WriteResult', 'id rev ok')
Reply = namedtuple('Reply', 'body headers')
Expect = namedtuple('Expect', 'ok absent errors')

DesignDoc = namedtuple('DesignDoc', 'views language', defaults=('javascript',))
ViewDef = namedtuple('ViewDef', 'map reduce', defaults=(None,))


class DeserializationError(ValueError):
    """
    Raised when a response body can't be turned into the expected value.
    """

    def __init__(self, msg, text):
        self.text = text
        super().__init__(msg)


class HTTPError(Exception):
    """
    Base class for exceptions raised based on HTTP response status.
    """

    def __init__(self, response, method, url):
        self.response = response
        self.data = response.content
        self.method = method
        self.url = url
        super().__init__()

    def __str__(self):
        return '{} {}: {} {}'.format(
            self.response.status_code, self.response.reason_phrase,
            self.method, self.url
        )


class ClientError(HTTPError):
    """
    Base class for all 4xx Client Error exceptions.
    """


class BadRequest(ClientError):
    '400 Bad Request'

class InvalidName(BadRequest):
    '400 Invalid database name'

class AuthorizationRequired(ClientError):
    '401 Unauthorized'

class ReadPrivilegeRequired(AuthorizationRequired):
    '401 Read privilege required'

class WritePrivilegeRequired(AuthorizationRequired):
    '401 Write privilege required'

class AdminPrivilegeRequired(AuthorizationRequired):
    '401 Server administrator privileges required'

class DatabaseNotFound(ClientError):
    '404 Database does not exist'

class Conflict(ClientError):
    '409 Conflict'


class ServerError(HTTPError):
    """
    Base class for 5xx Server Error exceptions.
    """


class ViewFunctionError(ServerError):
    '500 Error in view function'


class UnexpectedStatus(HTTPError):
    """
    Raised for any status the operation has no mapping for.
    """


class NonTextBody(HTTPError):
    """
    Raised when a response body is neither JSON nor text.
    """


HEAD_DOC = Expect((200, 304), (404,), {
    401: ReadPrivilegeRequired,
})
GET_DOC = Expect((200, 304), (404,), {
    400: BadRequest,
    401: ReadPrivilegeRequired,
})
WRITE_DOC = Expect((201, 202), (), {
    400: BadRequest,
    401: WritePrivilegeRequired,
    404: DatabaseNotFound,
    409: Conflict,
})
DELETE_DOC = Expect((200, 202), (404,), {
    400: BadRequest,
    401: WritePrivilegeRequired,
    409: Conflict,
})
ALL_DBS = Expect((200,), (), {
    401: AuthorizationRequired,
})
CREATE_DB = Expect((201, 412), (), {
    400: InvalidName,
    401: AdminPrivilegeRequired,
})
DELETE_DB = Expect((200, 404), (), {
    400: InvalidName,
    401: AdminPrivilegeRequired,
})


def check_status(response, expect, method, url):
    """
    Return True for an *ok* status, False for an *absent* status.

    Any other status raises the exception class *expect* maps it to, or
    `UnexpectedStatus` when there is no mapping.
    """
    status = response.status_code
    if status in expect.ok:
        return True
    if status in expect.absent:
        return False
    E = expect.errors.get(status, UnexpectedStatus)
    raise E(response, method, url)


def dumps(obj, pretty=False):
    """
    Safe and opinionated use of ``json.dumps()``.

    This function always calls ``json.dumps()`` with *ensure_ascii=False* and
    *sort_keys=True*.

    For example:

    >>> doc = {
    ...     'hello': 'мир',
    ...     'welcome': 'все',
    ... }
    >>> dumps(doc)
    '{"hello":"мир","welcome":"все"}'

    By default compact encoding is used, but if you supply *pretty=True*,
    4-space indentation will be used:

    >>> print(dumps(doc, pretty=True))
    {
        "hello": "мир",
        "welcome": "все"
    }

    """
    if pretty:
        return json.dumps(obj,
            ensure_ascii=False,
            sort_keys=True,
            separators=(',',': '),
            indent=4,
        )
    return json.dumps(obj,
        ensure_ascii=False,
        sort_keys=True,
        separators=(',',':'),
    )


def loads_object(text):
    """
    Decode *text* as a JSON object, raising `DeserializationError` otherwise.
    """
    try:
        obj = json.loads(text)
    except ValueError as e:
        raise DeserializationError('invalid JSON: {}'.format(e), text) from e
    if not isinstance(obj, dict):
        raise DeserializationError(
            'expected a JSON object; got {!r}'.format(type(obj).__name__), text
        )
    return obj


def map_headers(headers):
    """
    Split each header value on commas into a list of trimmed values.

    For example:

    >>> map_headers({'Allow': 'GET, HEAD, ,POST', 'ETag': '"1-abc"'})
    {'Allow': ['GET', 'HEAD', 'POST'], 'ETag': ['"1-abc"']}

    """
    return dict(
        (name, [v.strip() for v in value.split(',') if v.strip()])
        for (name, value) in headers.items()
    )


def revision_from_headers(headers):
    """
    Return the revision from the ETag in a `map_headers()` style mapping.

    >>> revision_from_headers({'etag': ['"2-def"']})
    '2-def'

    """
    for (name, values) in headers.items():
        if name.lower() == 'etag' and values:
            return values[0].strip('"')
    raise DeserializationError('no ETag header', None)


def doc_path(doc_id):
    """
    Quote *doc_id* for use as a path component.

    The ``_design/`` and ``_local/`` prefixes are kept as-is:

    >>> doc_path('a/b')
    'a%2Fb'
    >>> doc_path('_design/shop')
    '_design/shop'

    """
    for prefix in ('_design/', '_local/'):
        if doc_id.startswith(prefix):
            return prefix + quote(doc_id[len(prefix):], safe='')
    return quote(doc_id, safe='')


def _model_fields(model):
    if isinstance(model, type) and issubclass(model, tuple) \
            and hasattr(model, '_fields'):
        return model._fields
    if dataclasses.is_dataclass(model):
        return tuple(f.name for f in dataclasses.fields(model))
    raise TypeError(
        'model must be a namedtuple or dataclass; got {!r}'.format(model)
    )


def _encode_value(value):
    if hasattr(value, '_asdict'):
        return dict(value._asdict())
    if dataclasses.is_dataclass(value):
        return dataclasses.asdict(value)
    return dict(value)


class Codec:
    """
    Convert model values to JSON objects and back.

    Without a *model*, documents are plain ``dict`` instances, minus the
    ``_id`` and ``_rev`` that `Doc` carries separately:

    >>> Codec().decode({'_id': 'a', '_rev': '1-b', 'x': 1})
    {'x': 1}

    With a namedtuple or dataclass *model*, only its fields are kept:

    >>> Point = namedtuple('Point', 'x y')
    >>> codec = Codec(Point)
    >>> codec.decode({'_id': 'a', '_rev': '1-b', 'x': 1, 'y': 2})
    Point(x=1, y=2)
    >>> codec.encode(Point(1, 2))
    {'x': 1, 'y': 2}

    Anything else needs explicit *encode* and *decode* callables.
    """

    __slots__ = ('model', 'fields', '_encode', '_decode')

    def __init__(self, model=None, encode=None, decode=None):
        self.model = model
        self.fields = None
        if decode is None and model is not None:
            self.fields = _model_fields(model)
        self._encode = (_encode_value if encode is None else encode)
        self._decode = decode

    def __repr__(self):
        return '{}({!r})'.format(self.__class__.__name__, self.model)

    def encode(self, value):
        obj = self._encode(value)
        if not isinstance(obj, dict):
            raise TypeError(
                'encode must return a dict; got {!r}'.format(type(obj))
            )
        return obj

    def decode(self, obj):
        if self._decode is not None:
            return self._decode(obj)
        if self.model is None:
            return dict(
                (k, v) for (k, v) in obj.items() if k not in ('_id', '_rev')
            )
        return self.model(**dict(
            (name, obj[name]) for name in self.fields if name in obj
        ))


def _encode_design(design):
    views = {}
    for (name, view) in design.views.items():
        views[name] = {'map': view.map}
        if view.reduce is not None:
            views[name]['reduce'] = view.reduce
    return {'language': design.language, 'views': views}


def _decode_design(obj):
    views = dict(
        (name, ViewDef(view['map'], view.get('reduce')))
        for (name, view) in obj.get('views', {}).items()
    )
    return DesignDoc(views, obj.get('language', 'javascript'))


DEFAULT_CODEC = Codec()
DESIGN_CODEC = Codec(DesignDoc, _encode_design, _decode_design)


def serialize_doc(model, rev=None, codec=None):
    """
    Serialize *model* as JSON text, with ``_rev`` overlaid when *rev* is given.

    For example:

    >>> serialize_doc({'name': 'pen', '_rev': 'old'}, '1-abc')
    '{"_rev":"1-abc","name":"pen"}'
    >>> serialize_doc({'name': 'pen'})
    '{"name":"pen"}'

    The document ID isn't added; it travels in the URL path.
    """
    codec = (DEFAULT_CODEC if codec is None else codec)
    obj = dict(codec.encode(model))
    if rev is not None:
        obj['_rev'] = rev
    return dumps(obj)


def decode_doc(obj, codec=None, text=None):
    """
    Build a `Doc` from an already decoded JSON object.
    """
    codec = (DEFAULT_CODEC if codec is None else codec)
    try:
        _id = obj['_id']
        _rev = obj['_rev']
    except KeyError as e:
        raise DeserializationError('missing {}'.format(e), text) from e
    try:
        model = codec.decode(obj)
    except (TypeError, ValueError, KeyError, AttributeError) as e:
        raise DeserializationError(
            'cannot decode {!r}: {}'.format(_id, e), text
        ) from e
    return Doc(_id, _rev, model)


def deserialize_doc(text, codec=None):
    """
    Deserialize document *text* into a ``Doc(id, rev, model)``.

    >>> deserialize_doc('{"_id":"a","_rev":"1-b","x":1}')
    Doc(id='a', rev='1-b', model={'x': 1})

    """
    return decode_doc(loads_object(text), codec, text)


def deserialize_write_result(text):
    """
    Deserialize the ``{"id", "rev", "ok"}`` body returned by a write.

    >>> deserialize_write_result('{"ok":true,"id":"a","rev":"1-b"}')
    WriteResult(id='a', rev='1-b', ok=True)

    """
    obj = loads_object(text)
    try:
        return WriteResult(obj['id'], obj['rev'], obj.get('ok', False))
    except KeyError as e:
        raise DeserializationError('missing {}'.format(e), text) from e


def response_text(response, method, url):
    """
    Return the body of *response* as ``str``, or raise `NonTextBody`.
    """
    content_type = response.headers.get('content-type', '')
    mime = content_type.split(';')[0].strip().lower()
    if mime and not (mime == 'application/json' or mime.endswith('+json')
            or mime.startswith('text/')):
        raise NonTextBody(response, method, url)
    return response.text


def basic_auth_header(basic):
    b = '{username}:{password}'.format(**basic).encode()
    return 'Basic ' + b64encode(b).decode()


def _basic_auth_header(basic):
    return {'authorization': basic_auth_header(basic)}


def build_ssl_context(config):
    if 'context' in config:
        ctx = config['context']
        assert isinstance(ctx, ssl.SSLContext)
        return ctx
    ctx = ssl.create_default_context(cafile=config.get('ca_file'))
    if config.get('check_hostname') is False:
        ctx.check_hostname = False
    if 'cert_file' in config:
        ctx.load_cert_chain(config['cert_file'], config.get('key_file'))
    return ctx


def create_client(t, env, transport=None):
    """
    Create the ``httpx.AsyncClient`` used by a `Context`.
    """
    options = {}
    if t.scheme == 'https':
        options['verify'] = build_ssl_context(env.get('ssl', {}))
    if transport is not None:
        options['transport'] = transport
    return httpx.AsyncClient(headers={'user-agent': USER_AGENT}, **options)


class Context:
    """
    Share one HTTP client between multiple `CouchBase` instances.

    A `Server` and all the `Database` instances it hands out use the same
    `Context`, and so the same ``httpx.AsyncClient`` and its connections:

    >>> server = Server('http://localhost:5984/')
    >>> db = server.database('shop')
    >>> db.ctx is server.ctx
    True

    The *env* is either a URL or a ``dict`` like this::

        {
            'url': 'https://localhost:6984/',
            'basic': {'username': 'admin', 'password': 'secret'},
            'ssl': {'ca_file': '/path/to/ca.pem'},
        }

    The optional *transport* is handed straight to ``httpx.AsyncClient``.
    """

    __slots__ = ('env', 'basepath', 't', 'url', 'client')

    def __init__(self, env=None, transport=None):
        if env is None:
            env = DEFAULT_URL
        if not isinstance(env, (dict, str)):
            raise TypeError(
                'env must be a `dict` or `str`; got {!r}'.format(env)
            )
        self.env = ({'url': env} if isinstance(env, str) else env)
        url = self.env.get('url', DEFAULT_URL)
        t = urlparse(url)
        if t.scheme not in ('http', 'https'):
            raise ValueError(
                'url scheme must be http or https; got {!r}'.format(url)
            )
        if not t.netloc:
            raise ValueError('bad url: {!r}'.format(url))
        self.basepath = (t.path if t.path.endswith('/') else t.path + '/')
        self.t = t
        self.url = self.full_url(self.basepath)
        self.client = create_client(t, self.env, transport)

    def full_url(self, path):
        return ''.join([self.t.scheme, '://', self.t.netloc, path])

    def get_auth_headers(self):
        if 'basic' in self.env:
            return _basic_auth_header(self.env['basic'])
        return {}

    async def aclose(self):
        await self.client.aclose()


class CouchBase(object):
    """
    Base class for `Server` and `Database`.

    `CouchBase.request()` makes one request and hands back the raw response,
    while `CouchBase.reply()` also applies an `Expect` status table to it.
    Use either as an async context manager to close the shared `Context`.
    """

    def __init__(self, env=None, ctx=None):
        self.ctx = (Context(env) if ctx is None else ctx)
        self.env = self.ctx.env
        self.basepath = self.ctx.basepath
        self.url = self.ctx.url

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.ctx.aclose()

    async def request(self, method, parts, options=None, body=None,
            headers=None):
        h = {'accept': 'application/json'}
        if headers:
            h.update(headers)
        h.update(self.ctx.get_auth_headers())
        path = (self.basepath + '/'.join(parts) if parts else self.basepath)
        log.debug('%s %s', method, path)
        return await self.ctx.client.request(method, self.ctx.full_url(path),
            params=(options if options else None),
            content=(None if body is None else body.encode()),
            headers=h,
        )

    async def reply(self, method, parts, expect, options=None, body=None):
        headers = (None if body is None else
            {'content-type': 'application/json'}
        )
        response = await self.request(method, parts, options, body, headers)
        url = str(response.request.url)
        if not check_status(response, expect, method, url):
            return None
        text = ('' if method == 'HEAD' else response_text(response, method, url))
        return Reply(text, map_headers(response.headers))


class Server(CouchBase):
    """
    Create, list, and delete databases.

    For example:

    >>> s = Server('http://localhost:5984/')
    >>> s
    Server('http://localhost:5984/')
    >>> s.url
    'http://localhost:5984/'
    >>> s.basepath
    '/'

    """

    def __repr__(self):
        return '{}({!r})'.format(self.__class__.__name__, self.url)

    def database(self, name):
        """
        Create a `Database` with the same `Context` as this `Server`.
        """
        return Database(name, ctx=self.ctx)

    async def list_databases(self):
        """
        Return a `Database` for every database on the server.

        A successful response whose body isn't text is treated as an empty
        listing rather than an error.
        """
        response = await self.request('GET', ('_all_dbs',))
        url = str(response.request.url)
        check_status(response, ALL_DBS, 'GET', url)
        try:
            text = response_text(response, 'GET', url)
        except NonTextBody:
            log.warning('non-text body from %s, assuming no databases', url)
            return []
        try:
            names = json.loads(text)
        except ValueError as e:
            raise DeserializationError('invalid JSON: {}'.format(e), text) from e
        if not isinstance(names, list):
            raise DeserializationError('expected a JSON array', text)
        return [self.database(name) for name in names]

    async def get_database(self, name):
        response = await self.request('GET', (quote(name, safe=''),))
        if response.status_code == 200:
            return self.database(name)
        return None

    async def database_exists(self, name):
        response = await self.request('HEAD', (quote(name, safe=''),))
        return response.status_code == 200

    async def create_database(self, name):
        """
        Create the database *name*, returning its `Database`.

        Creating a database that already exists (412 Precondition Failed) is
        not an error, you get the same `Database` back.
        """
        await self.put_database(name)
        return self.database(name)

    async def put_database(self, name):
        """
        PUT the database *name*, returning True if it was created.
        """
        response = await self.request('PUT', (quote(name, safe=''),))
        check_status(response, CREATE_DB, 'PUT', str(response.request.url))
        if response.status_code == 201:
            log.info('created database %r', name)
            return True
        return False

    async def delete_database(self, name):
        """
        Delete the database *name*.

        Returns True whether or not the database existed.
        """
        response = await self.request('DELETE', (quote(name, safe=''),))
        check_status(response, DELETE_DB, 'DELETE', str(response.request.url))
        if response.status_code == 200:
            log.info('deleted database %r', name)
        return True


class Database(CouchBase):
    """
    Document-level operations for one database.

    For example:

    >>> db = Database('shop', 'http://localhost:5984/')
    >>> db
    Database('shop', 'http://localhost:5984/')
    >>> db.name
    'shop'
    >>> db.url
    'http://localhost:5984/shop/'
    >>> db.basepath
    '/shop/'

    The `Database.head()`, `Database.get()`, `Database.put()`,
    `Database.post()` and `Database.delete()` methods work with JSON text; use
    `Database.documents()` to work with typed values instead.
    """

    def __init__(self, name, env=None, ctx=None):
        super().__init__(env, ctx)
        self.name = name
        self.basepath += (quote(name, safe='') + '/')
        self.url = self.ctx.full_url(self.basepath)

    def __repr__(self):
        return '{}({!r}, {!r})'.format(
            self.__class__.__name__, self.name, self.ctx.url
        )

    def server(self):
        """
        Create a `Server` with the same `Context` as this `Database`.
        """
        return Server(ctx=self.ctx)

    def database(self, name):
        """
        Create a `Database` with the same `Context` as this `Database`.
        """
        return Database(name, ctx=self.ctx)

    async def ensure(self):
        """
        Ensure the database exists.

        Returns True if the database was created, False if it already existed.
        """
        return await self.server().put_database(self.name)

    async def head(self, doc_id):
        reply = await self.reply('HEAD', (doc_path(doc_id),), HEAD_DOC)
        return (None if reply is None else reply.headers)

    async def get(self, doc_id):
        return await self.reply('GET', (doc_path(doc_id),), GET_DOC)

    async def put(self, doc_id, body):
        return await self.reply('PUT', (doc_path(doc_id),), WRITE_DOC,
            body=body
        )

    async def post(self, body):
        return await self.reply('POST', (), WRITE_DOC, body=body)

    async def delete(self, doc_id, rev):
        return await self.reply('DELETE', (doc_path(doc_id),), DELETE_DOC,
            [('rev', rev)]
        )

    def documents(self, codec=None):
        return Documents(self, codec)

    @property
    def design(self):
        """
        `Documents` for this database's design documents.
        """
        return Documents(self, DESIGN_CODEC, '_design/')

    def view(self, design, view, codec=None):
        """
        Return a `sofa.views.View` for querying *view* in *design*.
        """
        from sofa.views import View
        return View(self, design, view, codec)

    def all_docs(self, codec=None):
        """
        Return a `sofa.views.View` over the built-in ``_all_docs`` index.
        """
        from sofa.views import View
        return View(self, None, '_all_docs', codec)


class Documents:
    """
    Typed document operations bound to a `Database` and a `Codec`.

    >>> Item = namedtuple('Item', 'name price')
    >>> items = Database('shop').documents(Codec(Item))
    >>> items.db
    Database('shop', 'http://127.0.0.1:5984/')

    When *prefix* is given, it's added to any doc ID that lacks it.  This is
    how `Database.design` addresses ``_design/`` documents.
    """

    def __init__(self, db, codec=None, prefix=''):
        self.db = db
        self.codec = (DEFAULT_CODEC if codec is None else codec)
        self.prefix = prefix

    def __repr__(self):
        return '{}({!r}, {!r})'.format(
            self.__class__.__name__, self.db, self.codec
        )

    def _id(self, doc_id):
        if doc_id.startswith(self.prefix):
            return doc_id
        return self.prefix + doc_id

    async def get(self, doc_id):
        reply = await self.db.get(self._id(doc_id))
        if reply is None:
            return None
        return deserialize_doc(reply.body, self.codec)

    async def head(self, doc_id):
        headers = await self.db.head(self._id(doc_id))
        if headers is None:
            return None
        return Head(revision_from_headers(headers), headers)

    async def put(self, doc_id, model, rev=None):
        """
        Create the doc *doc_id*, or update it when *rev* is given.
        """
        doc_id = self._id(doc_id)
        try:
            reply = await self.db.put(doc_id,
                serialize_doc(model, rev, self.codec)
            )
        except Conflict:
            log.warning('Conflict saving %s', doc_id)
            raise
        return deserialize_write_result(reply.body)

    async def post(self, model):
        """
        Create a new doc, letting the server pick its ID.
        """
        reply = await self.db.post(serialize_doc(model, codec=self.codec))
        return deserialize_write_result(reply.body)

    async def delete(self, doc_id, rev):
        reply = await self.db.delete(self._id(doc_id), rev)
        if reply is None:
            return None
        return deserialize_write_result(reply.body)

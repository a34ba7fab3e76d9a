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
Test helpers for `sofa`, including an in-memory fake CouchDB.

`FakeCouch` answers requests made through ``httpx.MockTransport``, so the
whole request/response path is exercised without a real server.
"""

import os
import re
import json
from hashlib import md5
from uuid import uuid4
from urllib.parse import unquote

import httpx

from sofa import Context, Server, basic_auth_header, dumps


DB_NAME = re.compile(r'^[a-z][a-z0-9_$()+/-]*$')


def random_dbname():
    return 'db-' + os.urandom(8).hex()


def next_rev(prev, body):
    num = (1 if prev is None else int(prev.split('-')[0]) + 1)
    return '{}-{}'.format(num, md5(dumps(body).encode()).hexdigest())


def _error(status, error, reason):
    return httpx.Response(status, json={'error': error, 'reason': reason})


class FakeCouch:
    """
    Just enough of CouchDB to test the client against.

    Use `FakeCouch.fail()` to force a status for one method and path, and
    `FakeCouch.views` to provide the rows of a view, keyed by
    ``(dbname, design, view)``.
    """

    def __init__(self, basic=None):
        self.basic = basic
        self.dbs = {}
        self.views = {}
        self.overrides = {}
        self.requests = []

    def transport(self):
        return httpx.MockTransport(self.handle)

    def server(self, url='http://127.0.0.1:5984/'):
        env = {'url': url}
        if self.basic is not None:
            env['basic'] = self.basic
        return Server(ctx=Context(env, transport=self.transport()))

    def fail(self, method, path, status, content=b'{"error":"x","reason":"y"}',
            content_type='application/json', headers=None):
        headers = dict(headers or {})
        headers['content-type'] = content_type
        self.overrides[(method, path)] = (status, content, headers)

    def handle(self, request):
        self.requests.append(request)
        path = request.url.raw_path.decode().split('?')[0]
        key = (request.method, path)
        if key in self.overrides:
            (status, content, headers) = self.overrides[key]
            return httpx.Response(status, content=content, headers=headers)
        if self.basic is not None:
            expected = basic_auth_header(self.basic)
            if request.headers.get('authorization') != expected:
                return _error(401, 'unauthorized', 'Name or password is incorrect.')
        stripped = path.strip('/')
        parts = ([unquote(p) for p in stripped.split('/')] if stripped else [])
        return self.route(request, parts)

    def route(self, request, parts):
        if not parts:
            return httpx.Response(200, json={'couchdb': 'Welcome'})
        if parts == ['_all_dbs']:
            return httpx.Response(200, json=sorted(self.dbs))
        (name, rest) = (parts[0], parts[1:])
        if not rest:
            return self.database(request, name)
        if name not in self.dbs:
            return _error(404, 'not_found', 'Database does not exist.')
        db = self.dbs[name]
        if rest == ['_all_docs']:
            rows = [
                {'id': _id, 'key': _id, 'value': {'rev': db[_id]['_rev']}}
                for _id in sorted(db)
            ]
            return self.rows(request, db, rows)
        if len(rest) == 4 and rest[0] == '_design' and rest[2] == '_view':
            rows = self.views.get((name, '_design/' + rest[1], rest[3]))
            if rows is None:
                return _error(404, 'not_found', 'missing_named_view')
            return self.rows(request, db, rows)
        if rest[0] in ('_design', '_local'):
            doc_id = '/'.join(rest[:2])
        else:
            doc_id = rest[0]
        return self.document(request, db, doc_id)

    def database(self, request, name):
        method = request.method
        if method == 'PUT':
            if not DB_NAME.match(name):
                return _error(400, 'illegal_database_name', 'Bad name.')
            if name in self.dbs:
                return _error(412, 'file_exists', 'The database could not be created.')
            self.dbs[name] = {}
            return httpx.Response(201, json={'ok': True})
        if name not in self.dbs:
            if method == 'HEAD':
                return httpx.Response(404)
            return _error(404, 'not_found', 'Database does not exist.')
        db = self.dbs[name]
        if method == 'DELETE':
            del self.dbs[name]
            return httpx.Response(200, json={'ok': True})
        if method == 'HEAD':
            return httpx.Response(200)
        if method == 'GET':
            return httpx.Response(200, json={'db_name': name, 'doc_count': len(db)})
        if method == 'POST':
            body = json.loads(request.content.decode())
            doc_id = body.pop('_id', uuid4().hex)
            if doc_id in db:
                return _error(409, 'conflict', 'Document update conflict.')
            return self.save(db, doc_id, body, None)
        return _error(405, 'method_not_allowed', method)

    def save(self, db, doc_id, body, prev):
        rev = next_rev(prev, body)
        doc = dict(body)
        doc['_id'] = doc_id
        doc['_rev'] = rev
        db[doc_id] = doc
        return httpx.Response(201,
            json={'ok': True, 'id': doc_id, 'rev': rev},
            headers={'etag': '"{}"'.format(rev)},
        )

    def document(self, request, db, doc_id):
        method = request.method
        current = db.get(doc_id)
        if method == 'PUT':
            body = json.loads(request.content.decode())
            rev = body.pop('_rev', request.url.params.get('rev'))
            body.pop('_id', None)
            if current is None:
                if rev is not None:
                    return _error(409, 'conflict', 'Document update conflict.')
                return self.save(db, doc_id, body, None)
            if rev != current['_rev']:
                return _error(409, 'conflict', 'Document update conflict.')
            return self.save(db, doc_id, body, current['_rev'])
        if current is None:
            if method == 'HEAD':
                return httpx.Response(404)
            return _error(404, 'not_found', 'missing')
        etag = {'etag': '"{}"'.format(current['_rev'])}
        if method == 'HEAD':
            return httpx.Response(200, headers=etag)
        if method == 'GET':
            return httpx.Response(200, json=current, headers=etag)
        if method == 'DELETE':
            if request.url.params.get('rev') != current['_rev']:
                return _error(409, 'conflict', 'Document update conflict.')
            del db[doc_id]
            rev = next_rev(current['_rev'], {'_deleted': True})
            return httpx.Response(200, json={'ok': True, 'id': doc_id, 'rev': rev})
        return _error(405, 'method_not_allowed', method)

    def rows(self, request, db, rows):
        params = request.url.params
        if 'key' in params:
            key = json.loads(params['key'])
            rows = [r for r in rows if r['key'] == key]
        elif 'keys' in params:
            keys = json.loads(params['keys'])
            rows = [r for k in keys for r in rows if r['key'] == k]
        total = len(rows)
        skip = int(params.get('skip', 0))
        if 'limit' in params:
            rows = rows[skip:skip + int(params['limit'])]
        else:
            rows = rows[skip:]
        if params.get('include_docs') == 'true':
            rows = [dict(r, doc=db.get(r['id'])) for r in rows]
        return httpx.Response(200,
            json={'total_rows': total, 'offset': skip, 'rows': rows}
        )

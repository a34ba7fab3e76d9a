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
Query CouchDB views.

A `View` is bound to a `sofa.Database`, a design doc, a view name, and a
`sofa.Codec` for any documents included in the result.  The query string is
built by `build_query()`:

>>> build_query()
[]
>>> build_query(['a'])
[('key', '"a"')]
>>> build_query(['a', 'b'], Page(10, 5))
[('keys', '["a","b"]'), ('skip', '10'), ('limit', '5')]
>>> build_query(include_docs=True)
[('include_docs', 'true')]

Note that a single key is sent as ``key``, never as a one item ``keys`` list.

Results come back as a `ViewResult`:

>>> result = deserialize_view('{"total_rows":1,"offset":0,"rows":[{"id":"a","key":"x","value":null}]}')
>>> result.total_rows
1
>>> result.rows
[Row(id='a', key='x', value=None, doc=None)]

"""

from collections import namedtuple
from urllib.parse import quote

from sofa import (
    dumps,
    loads_object,
    decode_doc,
    Expect,
    BadRequest,
    ReadPrivilegeRequired,
    ViewFunctionError,
    DeserializationError,
)


Page = namedtuple('Page', 'skip limit')
Row = namedtuple('Row', 'id key value doc')
ViewResult = namedtuple('ViewResult', 'total_rows offset rows')

VIEW = Expect((200, 304), (404,), {
    400: BadRequest,
    401: ReadPrivilegeRequired,
    500: ViewFunctionError,
})


def build_query(keys=(), page=None, include_docs=False):
    """
    Return the (name, value) query pairs for a view request.

    Keys are JSON encoded; *page* is a ``(skip, limit)`` pair.
    """
    keys = list(keys)
    query = []
    if len(keys) == 1:
        query.append(('key', dumps(keys[0])))
    elif len(keys) > 1:
        query.append(('keys', dumps(keys)))
    if page is not None:
        (skip, limit) = page
        query.append(('skip', str(skip)))
        query.append(('limit', str(limit)))
    if include_docs:
        query.append(('include_docs', 'true'))
    return query


def deserialize_view(text, codec=None, include_docs=False):
    obj = loads_object(text)
    if not isinstance(obj.get('rows'), list):
        raise DeserializationError('missing rows', text)
    rows = []
    for row in obj['rows']:
        if not isinstance(row, dict):
            raise DeserializationError('bad row: {!r}'.format(row), text)
        doc = row.get('doc')
        if include_docs and doc is not None:
            doc = decode_doc(doc, codec, text)
        else:
            doc = None
        rows.append(Row(row.get('id'), row.get('key'), row.get('value'), doc))
    return ViewResult(obj.get('total_rows'), obj.get('offset'), rows)


def _design_name(design):
    if design.startswith('_design/'):
        return design[len('_design/'):]
    return design


class View:
    """
    Query one view, optionally including the documents.

    When *design* is None, *view* names a top-level index like
    ``'_all_docs'``.
    """

    def __init__(self, db, design, view, codec=None):
        self.db = db
        self.design = design
        self.view = view
        self.codec = codec
        if design is None:
            self.parts = (view,)
        else:
            self.parts = (
                '_design', quote(_design_name(design), safe=''),
                '_view', quote(view, safe=''),
            )

    def __repr__(self):
        return '{}({!r}, {!r}, {!r})'.format(
            self.__class__.__name__, self.db, self.design, self.view
        )

    async def query(self, keys=(), page=None):
        """
        Return a `ViewResult`, or None if the view or database doesn't exist.
        """
        return await self._query(build_query(keys, page), False)

    async def query_docs(self, keys=(), page=None):
        """
        Like `View.query()`, but each `Row` also carries its `sofa.Doc`.
        """
        return await self._query(build_query(keys, page, True), True)

    async def _query(self, options, include_docs):
        reply = await self.db.reply('GET', self.parts, VIEW, options)
        if reply is None:
            return None
        return deserialize_view(reply.body, self.codec, include_docs)

#!/usr/bin/python
# Copyright (C) 2019-24 Dr. Ralf Schlatterbeck Open Source Consulting.
# Reichergasse 131, A-3411 Weidling.
# Web: http://www.runtux.com Email: office@runtux.com
# ****************************************************************************
# Redistribution and use in source and binary forms, with or without
# modification, are permitted provided that the following conditions are
# met:
#
# 1. Redistributions of source code must retain the above copyright
#    notice, this list of conditions and the following disclaimer.
#
# 2. Redistributions in binary form must reproduce the above copyright
#    notice, this list of conditions and the following disclaimer in the
#    documentation and/or other materials provided with the distribution.
#
# THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS
# IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED
# TO, THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A
# PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT
# HOLDER OR CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL,
# SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED
# TO, PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR
# PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING
# NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS
# SOFTWARE, EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************

""" Tokenizer and serializer for single ADIF fields.
    A field is written as <name:length>value or, with a type code,
    as <name:length:T>value. The length is the only thing telling us
    where a value ends, values may contain '<', '>', ':' or white
    space. We therefore never look inside a value for tag syntax.
    Values are bytes on the wire, they are decoded with the given
    encoding using the 'surrogateescape' error handler so that any
    byte sequence survives a round trip.

    >>> f, pos = next_field (b'<CALL:4>W1AW  <QSO_DATE:8:D>20230101')
    >>> f.name, f.value, f.type_code, pos
    ('call', 'W1AW', None, 14)
    >>> next_field (b'<CALL:4>W1AW  <QSO_DATE:8:D>20230101', 14)
    (<qso_date:8:D>20230101, 36)
    >>> get_next_field (b'<Comment:6>a<b>:c  <x:0>')
    (<comment:6>a<b>:c, b'<x:0>')
    >>> get_next_field (b'<x:0>')
    (<x:0>, b'')
    >>> serialize_field ('call', 'OE3RSU')
    b'<call:6>OE3RSU'
    >>> serialize_field ('name', 'J\\xf6rg', 'S')
    b'<name:5:S>J\\xc3\\xb6rg'
    >>> next_field (b'<call:abc>W1AW')
    Traceback (most recent call last):
    ...
    adifrecord.field.ADIF_Invalid_Length: 0: Invalid length for call: abc
    >>> next_field (b'<call:10>W1AW')
    Traceback (most recent call last):
    ...
    adifrecord.field.ADIF_Truncated_Value: 0: Need 10 bytes for call, got 4
"""

import re
from rsclib.autosuper import autosuper

class ADIF_Syntax_Error (RuntimeError) :
    """ Base class of all errors found when parsing, the offset is the
        byte position of the offending tag in the parsed buffer.
    """

    def __init__ (self, offset, msg) :
        self.offset = offset
        RuntimeError.__init__ (self, '%s: %s' % (offset, msg))
    # end def __init__

# end class ADIF_Syntax_Error

class ADIF_Malformed_Tag   (ADIF_Syntax_Error) : pass
class ADIF_Invalid_Length  (ADIF_Syntax_Error) : pass
class ADIF_Truncated_Value (ADIF_Syntax_Error) : pass
class ADIF_Invalid_Name    (ValueError)        : pass

default_encoding = 'utf-8'
# Characters that would break the tag syntax
reserved         = '<:>'
whitespace       = re.compile (rb'\s*')

def _text (b) :
    return b.decode ('ascii', 'backslashreplace')
# end def _text

def check_name (name) :
    if not name :
        raise ADIF_Invalid_Name ('Empty field name')
    for c in reserved :
        if c in name :
            raise ADIF_Invalid_Name \
                ('Invalid character %r in field name %r' % (c, name))
# end def check_name

def check_type_code (type_code) :
    """ Type codes are a single ASCII character, in practice a letter.
    """
    if type_code is None :
        return
    if  (  len (type_code) != 1
        or type_code in reserved
        or ord (type_code) > 127
        ) :
        raise ADIF_Invalid_Name ('Invalid type code: %r' % type_code)
# end def check_type_code

def skip_whitespace (buf, pos = 0) :
    return whitespace.match (buf, pos).end ()
# end def skip_whitespace

class Field (autosuper) :
    """ A single ADIF field: lowercase name, decoded value and optional
        one-character type code.

    >>> Field ('CALL', 'W1AW')
    <call:4>W1AW
    >>> f = Field ('qso_date', '20230101', 'D')
    >>> f.has_type, f.type_code
    (True, 'D')
    >>> Field ('my:call', 'W1AW')
    Traceback (most recent call last):
    ...
    adifrecord.field.ADIF_Invalid_Name: Invalid character ':' in field name 'my:call'
    """

    def __init__ (self, name, value, type_code = None) :
        self.__super.__init__ ()
        check_name (name)
        check_type_code (type_code)
        self.name      = name.lower ()
        self.value     = value
        self.type_code = type_code
    # end def __init__

    @property
    def has_type (self) :
        return self.type_code is not None
    # end def has_type

    def serialize (self, encoding = default_encoding, typed = True) :
        type_code = None
        if typed :
            type_code = self.type_code
        return serialize_field (self.name, self.value, type_code, encoding)
    # end def serialize

    def __eq__ (self, other) :
        if not isinstance (other, Field) :
            return NotImplemented
        return \
            (   self.name      == other.name
            and self.value     == other.value
            and self.type_code == other.type_code
            )
    # end def __eq__
    __hash__ = None

    def __str__ (self) :
        return self.serialize ().decode (default_encoding, 'surrogateescape')
    # end def __str__
    __repr__ = __str__

# end class Field

def next_field (buf, pos = 0, encoding = default_encoding) :
    """ Parse the next field of buf starting at pos.
        Return the Field and the position of the remaining input with
        leading white space already skipped. Any text before the
        opening '<' is ignored. Error offsets are positions in buf.
        Only white space after the value is skipped, the end of buf is
        not trimmed: trailing blanks inside the last value are kept.
    """
    start = buf.find (b'<', pos)
    if start < 0 :
        raise ADIF_Malformed_Tag (pos, 'Expected tag start')
    colon = buf.find (b':', start + 1)
    end   = buf.find (b'>', start + 1)
    if colon < 0 or 0 <= end < colon :
        raise ADIF_Malformed_Tag (start, 'Expected length in tag')
    if end < 0 :
        raise ADIF_Malformed_Tag (start, 'Unterminated tag')
    n = buf [start + 1:colon]
    if not n :
        raise ADIF_Malformed_Tag (start, 'Empty tag')
    if b'<' in n :
        raise ADIF_Malformed_Tag (start, 'Invalid tag name: %s' % _text (n))
    name = n.decode (encoding, 'surrogateescape').lower ()

    type_code  = None
    start_type = buf.find (b':', colon + 1, end)
    if start_type < 0 :
        length = buf [colon + 1:end]
    else :
        length = buf [colon + 1:start_type]
        t = buf [start_type + 1:end]
        if len (t) != 1 or t in b'<:' or t [0] > 127 :
            raise ADIF_Malformed_Tag \
                (start, 'Invalid type code for %s: %s' % (name, _text (t)))
        type_code = t.decode ('ascii')
    # isdigit on bytes only accepts ASCII digits and fails on empty
    if not length.isdigit () :
        raise ADIF_Invalid_Length \
            (start, 'Invalid length for %s: %s' % (name, _text (length)))
    count = int (length)

    v_start = end + 1
    v_end   = v_start + count
    if v_end > len (buf) :
        raise ADIF_Truncated_Value \
            ( start
            , 'Need %d bytes for %s, got %d'
            % (count, name, len (buf) - v_start)
            )
    value = buf [v_start:v_end].decode (encoding, 'surrogateescape')
    field = Field (name, value, type_code)
    return field, skip_whitespace (buf, v_end)
# end def next_field

def get_next_field (buf, encoding = default_encoding) :
    """ Return the next field and the remaining (trimmed) buffer.
    """
    field, pos = next_field (buf, 0, encoding)
    return field, buf [pos:]
# end def get_next_field

def serialize_field (name, value, type_code = None, encoding = default_encoding) :
    """ Serialize a field, the length is the length of the encoded value.
    """
    v = value.encode (encoding, 'surrogateescape')
    n = name.encode  (encoding, 'surrogateescape')
    if type_code is None :
        return b'<%s:%d>' % (n, len (v)) + v
    return b'<%s:%d:%s>' % (n, len (v), type_code.encode ('ascii')) + v
# end def serialize_field

__all__ = \
    [ 'ADIF_Syntax_Error', 'ADIF_Malformed_Tag', 'ADIF_Invalid_Length'
    , 'ADIF_Truncated_Value', 'ADIF_Invalid_Name', 'Field'
    , 'next_field', 'get_next_field', 'serialize_field', 'skip_whitespace'
    , 'check_name', 'check_type_code', 'default_encoding'
    ]

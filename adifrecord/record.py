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

import io
import os
import sys
import hashlib
from argparse           import ArgumentParser
from adifrecord.field   import Field, next_field, serialize_field
from adifrecord.field   import skip_whitespace, default_encoding
from adifrecord.field   import ADIF_Syntax_Error, ADIF_Invalid_Name
from adifrecord.log     import Log_Mixin
from adifrecord.Version import VERSION
from rsclib.autosuper   import autosuper

# Independent of the record encoding, see Record.fingerprint
fingerprint_encoding = 'utf-8'

class Record (autosuper) :
    """ Represents the fields of one ADIF record.
        Field names are case-insensitive and stored in lowercase,
        fields keep their type code and are serialized in the order
        they were inserted. Two records compare equal if they contain
        the same names and values.
        The encoding keyword of the constructor is the record encoding,
        a field named "encoding" has to be added with set.

    >>> r = Record.parse (b'<CALL:4>W1AW<QSO_DATE:8:D>20230101')
    >>> r.get ('CALL'), r ['qso_date'], r.qso_date
    ('W1AW', '20230101', '20230101')
    >>> r.get_field ('qso_date').type_code
    'D'
    >>> r.serialize ()
    b'<call:4>W1AW<qso_date:8:D>20230101'
    >>> r.serialize (typed = False)
    b'<call:4>W1AW<qso_date:8>20230101'
    >>> r == Record (call = 'W1AW', qso_date = '20230101')
    True
    >>> r.set ('mode', 'CW')
    >>> print (r)
    <call:4>W1AW
    <qso_date:8:D>20230101
    <mode:2>CW
    >>> len (Record.parse (b'  \\n'))
    0
    """

    def __init__ (self, encoding = default_encoding, **kw) :
        """ Fields may be given as keyword arguments, None values are
            skipped.
        """
        self.__super.__init__ ()
        self.encoding = encoding
        self.fields   = {}
        for k in kw :
            if kw [k] is not None :
                self.set (k, kw [k])
    # end def __init__

    @classmethod
    def parse (cls, buf, encoding = default_encoding) :
        """ Parse all fields in buf, a str is encoded first.
            A later field with the same name replaces an earlier one.
            The first syntax error is raised, no partial record is
            returned.
        """
        if isinstance (buf, str) :
            buf = buf.encode (encoding, 'surrogateescape')
        buf    = bytes (buf)
        record = cls (encoding = encoding)
        pos    = skip_whitespace (buf)
        while pos < len (buf) :
            field, newpos = next_field (buf, pos, encoding)
            assert newpos > pos
            record.fields [field.name] = field
            pos = newpos
        return record
    # end def parse

    def as_dict (self) :
        return dict (self.items ())
    # end def as_dict

    def copy (self) :
        """ Independent copy, Field objects are replaced on set and
            can be shared.
        """
        r = self.__class__ (encoding = self.encoding)
        r.fields = dict (self.fields)
        return r
    # end def copy
    __copy__ = copy

    def fingerprint (self) :
        """ SHA-256 hex digest of the untyped serialization of all
            fields in name order. Neither insertion order nor type
            codes change the fingerprint. The hash is always computed
            over UTF-8, so records that compare equal share a
            fingerprint whatever their encoding.
        >>> a = Record (call = 'W1AW', band = '20m')
        >>> b = Record.parse (b'<BAND:3>20m <CALL:4:S>W1AW')
        >>> a.fingerprint () == b.fingerprint ()
        True
        >>> a.fingerprint () == Record (call = 'W1AW').fingerprint ()
        False
        """
        h = hashlib.sha256 ()
        for name in sorted (self.fields) :
            v = self.fields [name].value
            h.update (serialize_field (name, v, None, fingerprint_encoding))
        return h.hexdigest ()
    # end def fingerprint

    def get (self, name, default = None) :
        f = self.fields.get (name.lower ())
        if f is None :
            return default
        return f.value
    # end def get

    def get_field (self, name) :
        return self.fields.get (name.lower ())
    # end def get_field

    def items (self) :
        for name, f in self.fields.items () :
            yield name, f.value
    # end def items

    def serialize (self, typed = True) :
        """ Serialize as bytes. With typed=False type codes are
            omitted.
        """
        return b''.join \
            (f.serialize (self.encoding, typed) for f in self.fields.values ())
    # end def serialize

    def set (self, name, value, type_code = None) :
        """ Set (or replace) a field, bytes are decoded with the
            encoding of the record.
        """
        if isinstance (value, (bytes, bytearray)) :
            value = bytes (value).decode (self.encoding, 'surrogateescape')
        if not isinstance (value, str) :
            raise TypeError \
                ('Value of %s must be str or bytes, got %r' % (name, value))
        try :
            name.encode (self.encoding, 'surrogateescape')
        except UnicodeEncodeError :
            raise ADIF_Invalid_Name \
                ('Field name %r not encodable as %s' % (name, self.encoding))
        try :
            value.encode (self.encoding, 'surrogateescape')
        except UnicodeEncodeError :
            raise ValueError \
                ('Value of %s not encodable as %s' % (name, self.encoding))
        f = Field (name, value, type_code)
        self.fields [f.name] = f
    # end def set

    def __contains__ (self, name) :
        return name.lower () in self.fields
    # end def __contains__
    has_key = __contains__

    def __delitem__ (self, name) :
        del self.fields [name.lower ()]
    # end def __delitem__

    def __eq__ (self, other) :
        if not isinstance (other, Record) :
            return NotImplemented
        return self.as_dict () == other.as_dict ()
    # end def __eq__
    __hash__ = None

    def __getattr__ (self, name) :
        if name.startswith ('_') or name == 'fields' :
            raise AttributeError (name)
        try :
            return self [name]
        except KeyError as msg :
            raise AttributeError (str (msg))
    # end def __getattr__

    def __getitem__ (self, name) :
        return self.fields [name.lower ()].value
    # end def __getitem__

    def __iter__ (self) :
        return iter (self.fields)
    # end def __iter__

    def __len__ (self) :
        return len (self.fields)
    # end def __len__

    def __setitem__ (self, name, value) :
        self.set (name, value)
    # end def __setitem__

    def __str__ (self) :
        r = []
        for f in self.fields.values () :
            s = f.serialize (self.encoding)
            r.append (s.decode (self.encoding, 'surrogateescape'))
        return '\n'.join (r)
    # end def __str__

    def __repr__ (self) :
        return '%s (%r)' % (self.__class__.__name__, self.as_dict ())
    # end def __repr__

# end class Record

def parse (buf, encoding = default_encoding) :
    return Record.parse (buf, encoding)
# end def parse

class Record_Tool (Log_Mixin) :
    """ Command line access to a single record read from a file.
        Commands are methods starting with 'do_'.
    """

    def __init__ (self, args) :
        self.__super.__init__ (args.dry_run, args.verbose)
        self.args   = args
        self.record = None
    # end def __init__

    def execute (self) :
        method = getattr (self, 'do_' + self.args.command)
        self.load ()
        return method ()
    # end def execute

    def load (self) :
        if self.args.file :
            with io.open (self.args.file, 'rb') as f :
                buf = f.read ()
        else :
            buf = sys.stdin.buffer.read ()
        self.info ("Read %d bytes" % len (buf))
        self.record = parse (buf, encoding = self.args.encoding)
        self.info ("Parsed %d fields" % len (self.record))
    # end def load

    # Command methods start with 'do'

    def do_fingerprint (self) :
        print (self.record.fingerprint ())
    # end def do_fingerprint

    def do_get (self) :
        """ Print the value of each --field, return number of fields
            not found.
        """
        missing = 0
        for name in self.args.field or [] :
            value = self.record.get (name)
            if value is None :
                self.error ("Field %s not found" % name)
                missing += 1
            else :
                print (value)
        return missing
    # end def do_get

    def do_serialize (self) :
        data = self.record.serialize (typed = not self.args.untyped)
        if not self.args.output :
            sys.stdout.buffer.write (data + b'\n')
            sys.stdout.buffer.flush ()
            return
        if self.dry_run :
            self.notice \
                ("Would write %d bytes to %s" % (len (data), self.args.output))
            return
        with io.open (self.args.output, 'wb') as f :
            f.write (data)
        self.info ("Wrote %d bytes to %s" % (len (data), self.args.output))
    # end def do_serialize

    def do_show (self) :
        for name, f in self.record.fields.items () :
            if f.has_type :
                print ("%s:%s = %s" % (name, f.type_code, f.value))
            else :
                print ("%s = %s" % (name, f.value))
    # end def do_show

# end class Record_Tool

def main (argv = None) :
    methods  = [x [3:] for x in Record_Tool.__dict__ if x.startswith ('do_')]
    encoding = os.environ.get ('ADIF_ENCODING', default_encoding)
    cmd = ArgumentParser ()
    cmd.add_argument \
        ( "command"
        , help    = "Command to execute, allowed: %s" % ', '.join (methods)
        )
    cmd.add_argument \
        ( "file"
        , help    = "File containing the fields of one ADIF record,"
                    " default is standard input"
        , nargs   = '?'
        )
    cmd.add_argument \
        ( "-e", "--encoding"
        , help    = "Encoding of ADIF values, default=%(default)s"
        , default = encoding
        )
    cmd.add_argument \
        ( "-f", "--field"
        , help    = "Field to print with the get command, may be repeated"
        , action  = 'append'
        )
    cmd.add_argument \
        ( "-n", "--dry-run"
        , help    = "Dry run, do not write output file"
        , action  = 'store_true'
        )
    cmd.add_argument \
        ( "-o", "--output"
        , help    = "Output file for serialize command, default is"
                    " standard output"
        )
    cmd.add_argument \
        ( "--untyped"
        , help    = "Do not write type codes with serialize command"
        , action  = 'store_true'
        )
    cmd.add_argument \
        ( "-v", "--verbose"
        , help    = "Verbose output"
        , action  = 'store_true'
        )
    cmd.add_argument \
        ( "--version"
        , action  = 'version'
        , version = '%%(prog)s %s' % VERSION
        )
    # Options may come before or after the optional file argument
    args = cmd.parse_intermixed_args (argv)
    tool = Record_Tool (args)
    if args.command not in methods :
        tool.error ("Invalid command: %s" % args.command)
        sys.exit (1)
    try :
        if tool.execute () :
            sys.exit (1)
    except (OSError, ADIF_Syntax_Error) as e :
        tool.error (e)
        sys.exit (1)
# end def main

if __name__ == '__main__' :
    main ()

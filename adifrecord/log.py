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

import sys
from rsclib.autosuper import autosuper

class Log_Mixin (autosuper) :
    """ Console output for command line tools.
        Messages to the user go through notice, details only shown in
        verbose mode through info, problems through error on stderr.
        In dry-run mode all messages are prefixed to make clear that
        nothing was written.
    """

    def __init__ (self, dry_run = False, verbose = False, **kw) :
        self.verbose = verbose
        self.dryrun  = ''
        if dry_run :
            self.dryrun = '[dry run] '
        self.__super.__init__ (**kw)
    # end def __init__

    @property
    def dry_run (self) :
        return bool (self.dryrun)
    # end def dry_run

    def info (self, *args) :
        if self.verbose :
            print (self.dryrun, end = '', file = sys.stderr)
            print (*args, file = sys.stderr)
    # end def info

    def notice (self, *args) :
        print (self.dryrun, end = '')
        print (*args)
    # end def notice

    def error (self, *args) :
        print ("Error:", *args, file = sys.stderr)
    # end def error

# end class Log_Mixin

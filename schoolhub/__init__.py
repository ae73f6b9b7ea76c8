"""SchoolHub Backend.

Role-scoped registry API for schools, classrooms and students with
tenant isolation between school administrators.

Copyright (C) 2025 Global Digital Labs (gdlabs.io)
SPDX-License-Identifier: LGPL-3.0-or-later
"""

__version__ = "1.0.0"

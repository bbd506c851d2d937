"""
Examination Application Models Registry

This module serves as the central models registry for the examination app.
It imports and exposes all models from the logical submodules (users,
catalog, results) so they are registered with Django's ORM under the
single 'examination' app label.

Author: Exam Portal Development Team
Version: 1.0.0
"""

# Import all user-related models for registration with Django ORM
from .users.models import *

# Import all exam and question models for registration with Django ORM
from .catalog.models import *

# Import all result models for registration with Django ORM
from .results.models import *

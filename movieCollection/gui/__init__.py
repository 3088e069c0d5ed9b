"""
gui
~~~
All Qt widgets, dialogs and controllers.

•  No direct SQL here – everything goes through `metadata.services`.
•  Re-export the high-level symbols so the app can simply:

    from movieCollection.gui import MainWindow, start_services
"""

from movieCollection.gui.controller      import Services, build_services, start_services, cleanup_warning
from movieCollection.gui.main_window     import MainWindow
from movieCollection.gui.movie_dialog    import MovieDialog
from movieCollection.gui.category_dialog import CategoryDialog
from movieCollection.gui.movie_table     import MovieTableModel

__all__ = [
    "Services", "build_services", "start_services", "cleanup_warning",
    "MainWindow", "MovieDialog", "CategoryDialog", "MovieTableModel",
]

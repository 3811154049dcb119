# shoescrape/delegates/__init__.py

# This file makes the delegate classes directly available from the 'delegates' package.
# Instead of: from shoescrape.delegates.downloader_delegate import DownloaderDelegate
# We can now use: from shoescrape.delegates import DownloaderDelegate

from .html_document import HtmlDocument
from .downloader_delegate import DownloaderDelegate, parse_proxy_list
from .file_manager_delegate import FileManagerDelegate

"""WebStore reporting application: snapshot store, query engine and reporting API."""

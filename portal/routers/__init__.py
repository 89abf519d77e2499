from portal.routers import auth, chat, connect_requests, directory, library, realtime, site

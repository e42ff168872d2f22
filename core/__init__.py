# Shared configuration, logging and error translation for the Postman tools

from catalog_browser.main import main

main()
